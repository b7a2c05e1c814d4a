import re
from datetime import datetime, timezone
from email.utils import format_datetime
from xml.etree import ElementTree as ET

from src.crawlers.pipeline.types import Feed, FeedItem

CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
ATOM_NS = "http://www.w3.org/2005/Atom"
DC_NS = "http://purl.org/dc/elements/1.1/"
GENERATOR = "rss-source-bridge"

ET.register_namespace("content", CONTENT_NS)
ET.register_namespace("atom", ATOM_NS)
ET.register_namespace("dc", DC_NS)

# Anything outside the XML 1.0 Char production makes the document unparseable.
INVALID_XML_CHARS_RE = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _rfc822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value)


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    node = ET.SubElement(parent, tag)
    node.text = INVALID_XML_CHARS_RE.sub("", value)
    return node


def _append_item(channel: ET.Element, item: FeedItem) -> None:
    node = ET.SubElement(channel, "item")
    _text(node, "title", item.title)
    _text(node, "description", item.description)
    _text(node, "link", item.url)
    guid = _text(node, "guid", item.guid or item.url)
    guid.set("isPermaLink", "true" if item.guid == item.url else "false")
    for category in item.categories:
        if category:
            _text(node, "category", category)
    if item.author:
        _text(node, f"{{{DC_NS}}}creator", item.author)
    _text(node, "pubDate", _rfc822(item.published_at))
    if item.content_html:
        _text(node, f"{{{CONTENT_NS}}}encoded", item.content_html)


def render_rss(feed: Feed, *, feed_url: str, built_at: datetime | None = None) -> str:
    """Serialize ``feed`` as an RSS 2.0 document."""
    rss = ET.Element("rss", {"version": "2.0"})
    channel = ET.SubElement(rss, "channel")
    _text(channel, "title", feed.title)
    _text(channel, "description", feed.description)
    _text(channel, "link", feed.link)
    ET.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        {"href": feed_url, "rel": "self", "type": "application/rss+xml"},
    )
    _text(channel, "generator", GENERATOR)
    _text(channel, "lastBuildDate", _rfc822(built_at or datetime.now(timezone.utc)))
    _text(channel, "language", feed.language)
    _text(channel, "ttl", str(feed.ttl))

    for item in feed.items:
        _append_item(channel, item)

    body = ET.tostring(rss, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
