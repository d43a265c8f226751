import os

import pytest
from PIL import Image

from insta_mapper.media_service import MediaLocator, content_type_for, parse_range


@pytest.fixture
def media_root(tmp_path):
    root = tmp_path / "export" / "media"
    posts = root / "posts" / "202401"
    posts.mkdir(parents=True)
    Image.new("RGB", (40, 30), "red").save(posts / "photo.jpg")
    (posts / "clip.mp4").write_bytes(b"0123456789")
    os.utime(posts / "photo.jpg", (1000, 1000))
    os.utime(posts / "clip.mp4", (2000, 2000))

    activity = tmp_path / "export" / "your_instagram_activity" / "messages"
    activity.mkdir(parents=True)
    (activity / "photo.png").write_bytes(b"png")
    (tmp_path / "secret.txt").write_text("nope")
    return root


def test_list_media_newest_first(media_root):
    files = MediaLocator(media_root).list_media("posts")
    assert [f.path for f in files] == ["202401/clip.mp4", "202401/photo.jpg"]
    clip, photo = files
    assert (clip.media_type, clip.size, clip.width) == ("video", 10, None)
    assert (photo.media_type, photo.width, photo.height) == ("image", 40, 30)


def test_missing_bucket_is_empty(media_root):
    assert MediaLocator(media_root).list_media("reels") == []


def test_unknown_bucket(media_root):
    with pytest.raises(ValueError):
        MediaLocator(media_root).list_media("albums")


def test_unreadable_image_has_no_size(media_root):
    (media_root / "stories").mkdir()
    (media_root / "stories" / "broken.jpg").write_bytes(b"not an image")
    [broken] = MediaLocator(media_root).list_media("stories")
    assert (broken.media_type, broken.width, broken.height) == ("image", None, None)


def test_resolve_media_and_activity_paths(media_root):
    locator = MediaLocator(media_root)
    assert locator.resolve("posts/202401/clip.mp4").name == "clip.mp4"
    assert locator.resolve("your_instagram_activity/messages/photo.png").name == "photo.png"


@pytest.mark.parametrize("param", ["../../secret.txt", "posts/../../../secret.txt"])
def test_resolve_rejects_traversal(media_root, param):
    with pytest.raises(PermissionError):
        MediaLocator(media_root).resolve(param)


def test_resolve_rejects_absolute(media_root, tmp_path):
    with pytest.raises(PermissionError):
        MediaLocator(media_root).resolve(str(tmp_path / "secret.txt"))


def test_resolve_missing_file(media_root):
    with pytest.raises(FileNotFoundError):
        MediaLocator(media_root).resolve("posts/none.jpg")


def test_read_whole_file(media_root):
    locator = MediaLocator(media_root)
    result = locator.read_range(locator.resolve("posts/202401/clip.mp4"))
    assert result.data == b"0123456789"
    assert not result.partial
    assert result.content_type == "video/mp4"


@pytest.mark.parametrize("header, data, content_range", [
    ("bytes=2-5", b"2345", "bytes 2-5/10"),
    ("bytes=7-", b"789", "bytes 7-9/10"),
    ("bytes=-3", b"789", "bytes 7-9/10"),
    ("bytes=8-100", b"89", "bytes 8-9/10"),
])
def test_read_range(media_root, header, data, content_range):
    locator = MediaLocator(media_root)
    result = locator.read_range(locator.resolve("posts/202401/clip.mp4"), header)
    assert result.partial
    assert result.data == data
    assert result.content_range == content_range


@pytest.mark.parametrize("header", ["bytes=10-", "bytes=5-2", "bytes=-", "items=0-1", "bytes=-0"])
def test_unsatisfiable_ranges(header):
    with pytest.raises(ValueError):
        parse_range(header, 10)


@pytest.mark.parametrize("name, expected", [
    ("a.JPG", "image/jpeg"), ("a.webp", "image/webp"), ("a.mov", "video/quicktime"),
    ("a.txt", "application/octet-stream"),
])
def test_content_type(name, expected):
    assert content_type_for(name) == expected
