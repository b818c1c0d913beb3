import pytest

from argonsync.middleware.txt import read_txt, write_txt
from argonsync.vfs.filesystem import Vfs


@pytest.fixture
def vfs():
    return Vfs.new_virtual()


def test_read_txt(vfs):
    vfs.write("note.txt", "héllo\nworld".encode())
    assert read_txt("note.txt", vfs) == ("StringValue", {"Value": "héllo\nworld"})


def test_round_trip(vfs):
    remaining = write_txt({"Value": "some text", "Tags": ["a"]}, "value.txt", vfs)
    assert remaining == {"Tags": ["a"]}
    assert read_txt("value.txt", vfs)[1]["Value"] == "some text"


def test_non_string_value_is_dropped_without_writing(vfs):
    remaining = write_txt({"Value": 5}, "value.txt", vfs)
    assert remaining == {}
    assert not vfs.exists("value.txt")


def test_read_directory_fails(vfs):
    vfs.create_dir("folder")
    with pytest.raises(IsADirectoryError):
        read_txt("folder", vfs)