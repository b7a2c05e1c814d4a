from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

NOISE_SELECTOR = (
    "script, style, header, footer, nav, .sidebar, .comments, "
    ".editor_new_pc, .share, .fxg_btn"
)
MEDIA_SRC_SELECTOR = "img[src], video[src], source[src], audio[src], embed[src], iframe[src]"


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def select_text(root: BeautifulSoup | Tag, selector: str) -> str:
    node = root.select_one(selector)
    if node is None:
        return ""
    return node.get_text(strip=True)


def inner_html(node: Tag | None) -> str:
    if node is None:
        return ""
    return node.decode_contents()


def absolutize_images(root: BeautifulSoup | Tag, base_url: str) -> int:
    rewritten = 0
    for img in root.select("img[src]"):
        src = (img.get("src") or "").strip()
        if not src or src.startswith(("http://", "https://", "data:")):
            continue
        img["src"] = urljoin(base_url, src)
        rewritten += 1
    return rewritten


def absolutize_protocol_relative(url: str, scheme: str = "https") -> str:
    if url.startswith("//"):
        return f"{scheme}:{url}"
    return url


def absolutize_protocol_relative_media(root: BeautifulSoup | Tag, scheme: str = "https") -> int:
    rewritten = 0
    for node in root.select(MEDIA_SRC_SELECTOR):
        src = node.get("src") or ""
        if src.startswith("//"):
            node["src"] = absolutize_protocol_relative(src, scheme)
            rewritten += 1
    return rewritten


def strip_noise(root: Tag, selector: str = NOISE_SELECTOR) -> int:
    removed = 0
    for node in root.select(selector):
        node.decompose()
        removed += 1
    return removed
