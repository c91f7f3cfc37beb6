"""Demonstrations of deferred cleanup for files, sockets and other resources."""

from __future__ import annotations

import argparse
import socket
import threading
from dataclasses import dataclass, field
from pathlib import Path

from deferscope.defer import DeferScope


@dataclass
class DbConnection:
    """A mock database connection."""

    connection_string: str | None = None
    connected: bool = False


@dataclass
class CustomMutex:
    """A lock that remembers whether it is held."""

    mutex: threading.Lock = field(default_factory=threading.Lock)
    locked: bool = False


@dataclass
class GlTexture:
    """A mock graphics texture handle."""

    texture_id: int = 0
    bound: bool = False


def db_cleanup(conn: DbConnection | None) -> None:
    """Close a mock database connection."""
    if conn is None:
        return
    print(f"Closing database connection: {conn.connection_string}")
    conn.connection_string = None
    conn.connected = False


def mutex_cleanup(mtx: CustomMutex | None) -> None:
    """Unlock the mutex if it is held."""
    if mtx is not None and mtx.locked:
        mtx.mutex.release()
        mtx.locked = False
        print("Mutex unlocked")


def gl_cleanup(tex: GlTexture | None) -> None:
    """Unbind the texture if it is bound."""
    if tex is not None and tex.bound:
        print(f"Unbinding texture {tex.texture_id}")
        tex.bound = False


def socket_cleanup(sock: socket.socket) -> None:
    """Close the socket if it is still open."""
    if sock.fileno() != -1:
        sock.close()


def file_example(directory: str | Path = ".") -> tuple[Path, Path, Path]:
    """Write, copy and create a temporary file in ``directory``.

    Returns the paths of the written, copied and temporary files.
    Raises OSError if a file cannot be opened.
    """
    base = Path(directory)
    original = base / "example.txt"
    copy = base / "example_copy.txt"
    temp = base / "temp_data.tmp"

    print("Example 1: Basic file operations")
    with DeferScope() as scope:
        fp = scope.defer_fclose(open(original, "w", encoding="utf-8"))
        fp.write("Hello, World!\n")
        print("File written successfully")

    print("\nExample 2: Multiple files with error handling")
    with DeferScope() as scope:
        source = scope.defer_fclose(open(original, "r", encoding="utf-8"))
        dest = scope.defer_fclose(open(copy, "w", encoding="utf-8"))
        for line in source:
            dest.write(line)
        print("File copied successfully")

    print("\nExample 3: Temporary file cleanup")
    with DeferScope() as scope:
        fp = scope.defer_fclose(open(temp, "w", encoding="utf-8"))
        fp.write("Temporary data\n")
        print("Temporary file created and will be automatically closed")

    return original, copy, temp


def _tcp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_STREAM)


def socket_example(port: int = 8080) -> list[socket.socket]:
    """Create, bind and close sockets; returns every socket it made.

    Raises OSError if a socket cannot be created or bound.
    """
    created: list[socket.socket] = []

    print("Example 1: Basic socket operations")
    with DeferScope() as scope:
        sock = scope.defer(socket_cleanup, _tcp_socket())
        created.append(sock)
        print("Socket created successfully")

    print("\nExample 2: Socket with address binding")
    with DeferScope() as scope:
        sock = scope.defer(socket_cleanup, _tcp_socket())
        created.append(sock)
        sock.bind(("127.0.0.1", port))
        print(f"Socket bound to port {port}")

    print("\nExample 3: Multiple sockets")
    with DeferScope() as scope:
        server = scope.defer(socket_cleanup, _tcp_socket())
        created.append(server)
        client = scope.defer(socket_cleanup, _tcp_socket())
        created.append(client)
        print("Server and client sockets created")

    return created


def resource_example() -> tuple[DbConnection, CustomMutex, GlTexture]:
    """Manage a connection, a mutex and a texture; returns them after cleanup."""
    print("Example 1: Database connection")
    conn = DbConnection(connection_string="postgresql://localhost:5432/testdb")
    with DeferScope() as scope:
        scope.defer(db_cleanup, conn)
        conn.connected = True
        print(f"Connected to database: {conn.connection_string}")

    print("\nExample 2: Mutex handling")
    mtx = CustomMutex()
    with DeferScope() as scope:
        scope.defer(mutex_cleanup, mtx)
        mtx.mutex.acquire()
        mtx.locked = True
        print("Mutex locked")
        print("Performing work with mutex locked")

    print("\nExample 3: OpenGL resource")
    tex = GlTexture(texture_id=12345)
    with DeferScope() as scope:
        scope.defer(gl_cleanup, tex)
        print(f"Binding texture {tex.texture_id}")
        tex.bound = True
        print(f"Using texture {tex.texture_id} for rendering")

    return conn, mtx, tex


def main(argv: list[str] | None = None) -> int:
    """Run the file, socket and resource examples; returns an exit status."""
    parser = argparse.ArgumentParser(description="Run the deferred cleanup examples.")
    parser.add_argument("--directory", default=".", help="where example files are written")
    parser.add_argument("--port", type=int, default=8080, help="port the socket example binds")
    args = parser.parse_args(argv)

    try:
        file_example(args.directory)
    except OSError as error:
        print(f"Failed to open file: {error}")
        return 1
    try:
        socket_example(args.port)
    except OSError as error:
        print(f"Failed to bind socket: {error}")
        return 1
    resource_example()
    return 0