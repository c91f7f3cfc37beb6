import socket

import pytest

from deferscope.examples import (
    CustomMutex,
    DbConnection,
    GlTexture,
    db_cleanup,
    file_example,
    gl_cleanup,
    main,
    mutex_cleanup,
    resource_example,
    socket_cleanup,
    socket_example,
)
from deferscope.defer import DeferScope

CONNECTION = "postgresql://localhost:5432/testdb"


def test_db_cleanup(capsys):
    conn = DbConnection(connection_string=CONNECTION, connected=True)
    db_cleanup(conn)
    assert conn.connected is False and conn.connection_string is None
    assert f"Closing database connection: {CONNECTION}" in capsys.readouterr().out


def test_mutex_cleanup_unlocks(capsys):
    mtx = CustomMutex()
    with DeferScope() as scope:
        scope.defer(mutex_cleanup, mtx)
        mtx.mutex.acquire()
        mtx.locked = True
    assert mtx.locked is False
    assert not mtx.mutex.locked()
    assert "Mutex unlocked" in capsys.readouterr().out


def test_mutex_cleanup_when_not_locked(capsys):
    mtx = CustomMutex()
    mutex_cleanup(mtx)
    assert capsys.readouterr().out == ""


def test_gl_cleanup(capsys):
    tex = GlTexture(texture_id=12345, bound=True)
    gl_cleanup(tex)
    assert tex.bound is False
    assert capsys.readouterr().out == "Unbinding texture 12345\n"
    gl_cleanup(tex)
    assert capsys.readouterr().out == ""


def test_socket_cleanup_is_idempotent():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    socket_cleanup(sock)
    assert sock.fileno() == -1
    socket_cleanup(sock)
    assert sock.fileno() == -1


def test_resource_example(capsys):
    conn, mtx, tex = resource_example()
    assert conn.connected is False and conn.connection_string is None
    assert mtx.locked is False and not mtx.mutex.locked()
    assert tex.texture_id == 12345 and tex.bound is False
    out = capsys.readouterr().out
    assert f"Connected to database: {CONNECTION}" in out
    assert out.index("Mutex locked") < out.index("Mutex unlocked")
    assert "Using texture 12345 for rendering" in out


def test_file_example(tmp_path):
    original, copy, temp = file_example(tmp_path)
    assert original.read_text(encoding="utf-8") == "Hello, World!\n"
    assert copy.read_text(encoding="utf-8") == "Hello, World!\n"
    assert temp.read_text(encoding="utf-8") == "Temporary data\n"


def test_socket_example_closes_all():
    sockets = socket_example(0)
    assert len(sockets) == 4
    assert all(s.fileno() == -1 for s in sockets)


def test_socket_example_bind_failure_raises():
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        blocker.bind(("127.0.0.1", 0))
        blocker.listen(1)
        port = blocker.getsockname()[1]
        with pytest.raises(OSError):
            socket_example(port)
    finally:
        blocker.close()


def test_main_success(tmp_path, capsys):
    assert main(["--directory", str(tmp_path), "--port", "0"]) == 0
    out = capsys.readouterr().out
    assert "File copied successfully" in out
    assert "Server and client sockets created" in out
    assert (tmp_path / "example_copy.txt").exists()


def test_main_file_open_failure(tmp_path, capsys):
    missing = tmp_path / "nonexistent_directory" / "build"
    assert main(["--directory", str(missing), "--port", "0"]) == 1
    assert "Failed to open file" in capsys.readouterr().out