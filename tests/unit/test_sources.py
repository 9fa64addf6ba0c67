"""Tests for the content sources."""
import httpx
import pytest

from ragbot.exceptions import ContentUnavailable
from ragbot.sources import extract_visible_text, fetch_website_text, read_text_file

PAGE = """<!DOCTYPE html>
<html>
<head><title>Docs</title><style>body { color: red; }</style></head>
<body>
  <header>Site header</header>
  <nav><a href="/">Home</a></nav>
  <main>
    <h1>Install</h1>
    <p>Run   <code>pip install</code>
       &amp; enjoy.</p>
    <!-- hidden comment -->
  </main>
  <aside>Related links</aside>
  <script>var x = "<p>not text</p>";</script>
  <footer>Copyright</footer>
</body>
</html>"""


def test_extract_visible_text():
    assert extract_visible_text(PAGE) == "Install Run pip install & enjoy."


def test_extract_without_body():
    assert extract_visible_text("<p>Just   a <b>fragment</b></p>") == "Just a fragment"


@pytest.mark.asyncio
async def test_fetch_website_text():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=PAGE))

    text = await fetch_website_text("https://docs.test/install", transport=transport)

    assert text == "Install Run pip install & enjoy."


@pytest.mark.asyncio
async def test_fetch_http_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    with pytest.raises(ContentUnavailable):
        await fetch_website_text("https://docs.test/missing", transport=transport)


@pytest.mark.asyncio
async def test_fetch_page_without_text():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, text="<html><body><script>x()</script></body></html>")
    )

    with pytest.raises(ContentUnavailable):
        await fetch_website_text("https://docs.test/empty", transport=transport)


def test_read_text_file(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("# Title\n\nBody text", encoding="utf-8")

    assert read_text_file(path) == "# Title\n\nBody text"


def test_read_missing_file(tmp_path):
    with pytest.raises(ContentUnavailable):
        read_text_file(tmp_path / "nope.md")


def test_read_empty_file(tmp_path):
    path = tmp_path / "empty.md"
    path.write_text("  \n", encoding="utf-8")

    with pytest.raises(ContentUnavailable):
        read_text_file(path)
