"""Standalone HTML page generation for a single post."""

import html
from typing import Dict

from bs4 import BeautifulSoup

from .extractor import MARKUP_FORMATTER
from .models import ExtractedPost, PageRecord

# Attributes that survive the rewrite; every other one is removed
KEPT_ATTRIBUTES = {"href", "src"}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang='en'>
    <head>
        <title>{title}</title>
    <meta charset='utf-8'>
    </head>
    <body>
        <h1>{title}</h1>
        <p>{info}</p>
        {post_html}
        <p>
          <i>Scraped on {scrape_date} from <a href="{original_url}">{original_url}</a></i>
        </p>
    </body>
</html>"""


def rewrite_post_fragment(fragment: str, image_to_path: Dict[str, str]) -> str:
    """
    Point images at local copies and strip presentation attributes.

    Images with a local copy get their src replaced and a sequential
    id="img-N" so the index can link to a specific picture. Images without
    one keep their original URL.
    """
    # html.parser leaves a fragment as-is; lxml would wrap it in <html><body><p>
    soup = BeautifulSoup(fragment, "html.parser")

    img_count = 0
    for img in soup.find_all("img", src=True):
        path = image_to_path.get(img["src"].replace("&amp;", "&"))
        if path:
            img_count += 1
            img["src"] = path
            img["id"] = f"img-{img_count}"

    for tag in soup.find_all(True):
        for name in list(tag.attrs):
            if name in KEPT_ATTRIBUTES or (tag.name == "img" and name == "id"):
                continue
            del tag[name]

    return soup.decode_contents(formatter=MARKUP_FORMATTER)


def render_post_html(
    post: ExtractedPost,
    page: PageRecord,
    image_to_path: Dict[str, str],
) -> str:
    """Render the complete HTML document for one post."""
    info_pieces = []
    if post.author:
        info_pieces.append(html.escape(post.author))
    info_pieces.append(page.post_date.strftime("%b %d, %Y"))

    return PAGE_TEMPLATE.format(
        title=html.escape(page.title),
        info=", ".join(info_pieces),
        post_html=rewrite_post_fragment(post.html, image_to_path),
        scrape_date=page.scrape_date,
        original_url=html.escape(page.original_url),
    )
