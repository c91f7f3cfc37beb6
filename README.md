# deferscope

Register cleanup calls as you acquire resources, and have them run
automatically, newest first, when the scope ends. The scope can end
normally, by an early `return`, or by an exception.

## Installation

```
pip install deferscope
```

The package has no dependencies outside the standard library.

## Using a scope

`DeferScope` is a context manager. Each call to `defer(func, arg)` records a
function and its argument and returns `arg`. When the `with` block ends, the
recorded calls run in reverse order of registration.

```python
from deferscope.defer import DeferScope

def report(name):
    print("cleaning up", name)

with DeferScope() as scope:
    scope.defer(report, "first")
    scope.defer(report, "second")
    print("working")
# working
# cleaning up second
# cleaning up first
```

Scopes nest the way blocks do. An inner scope's cleanups run when the inner
`with` block ends, before anything registered in the outer one runs.

`len(scope)` gives the number of cleanups still pending. You can also close
a scope by hand with `close()`, which runs the pending cleanups at that point
and leaves the scope empty.

### Errors during cleanup

`close()`, and so the end of a `with` block, runs every pending cleanup even
when some of them raise. It then re-raises the first exception it met. An
exception raised inside the `with` block itself is never suppressed.

### Skipped cleanups

A cleanup is skipped if its function or its argument is `None`. As a result,
`scope.defer(func, None)` does nothing when the scope closes.

### Files and other objects

`defer_fclose(fp)` closes a file-like object when the scope ends.
`defer_free(obj)` calls `cleanup_free(obj)` when the scope ends.
`cleanup_free` first prints `Cleaning up free: <id>` and then handles the object:

- a `memoryview` is released;
- any other object that has a `clear()` method has that method called.

Both methods return the object they were given, so you can wrap an
acquisition in them directly:

```python
from deferscope.defer import DeferScope

with DeferScope() as scope:
    out = scope.defer_fclose(open("example.txt", "w"))
    out.write("Hello, World!\n")
# out is closed here
```

### Decorating a function

`with_defer` gives a function its own fresh scope for each call. The scope is
passed to the function as its first argument, so the function can register
cleanups as it goes:

```python
from deferscope.defer import with_defer

@with_defer
def copy(scope, source, dest):
    src = scope.defer_fclose(open(source))
    dst = scope.defer_fclose(open(dest, "w"))
    dst.writelines(src)

copy("example.txt", "example_copy.txt")
```

### Lower-level pieces

- `Deferred(func, arg)` holds one function and its argument.
  `Deferred.run()` calls `func(arg)` unless either one is `None`.
- `defer_cleanup(data)` runs a `Deferred`. It does nothing when given `None`.
- `cleanup_free(obj)` and `cleanup_fclose(fp)` are the ready-made cleanups
  used by `defer_free` and `defer_fclose`. Both do nothing when given `None`.

## Examples

The `deferscope.examples` module shows scopes managing files, sockets and a
few mock resources.

`file_example(directory=".")`
:   Works in three steps and returns the three paths:
    1. writes `example.txt`;
    2. copies it line by line to `example_copy.txt`;
    3. writes `temp_data.tmp`.

    Each file is closed by its scope. An `OSError` is raised if a file cannot be opened.

`socket_example(port=8080)`
:   Works in three steps and returns every socket it made, all of them closed:
    1. creates a TCP socket;
    2. creates another and binds it to `127.0.0.1` on `port`;
    3. creates a server and client pair.

    An `OSError` is raised if a socket cannot be created or bound.

`resource_example()`
:   Uses a scope to clean up three mock resources and returns them after cleanup:
    - a `DbConnection`, closed by `db_cleanup`;
    - a `CustomMutex`, whose lock is released by `mutex_cleanup`;
    - a `GlTexture`, unbound by `gl_cleanup`.

`socket_cleanup(sock)` closes a socket that is still open.

All of the examples can be run in turn from the command line:

```
deferscope-examples [--directory DIR] [--port PORT]
```

`--directory` sets where the example files are written (default: the current
directory). `--port` sets the port the socket example binds (default: 8080).
The command exits with status 1, after printing the error, if a file cannot
be opened or a socket cannot be bound. Otherwise it exits with status 0.

## What it does not do

`defer_free` does not manage memory. Python objects are freed by the
interpreter, and `cleanup_free` only releases or clears the object's contents.
`DbConnection` and `GlTexture` are stand-ins: the examples connect to no
database and touch no graphics library.

## Running the tests

```
pip install -e ".[test]"
pytest
```