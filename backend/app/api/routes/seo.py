"""
SEO routes: XML sitemap and robots.txt for the frontend.
"""
from datetime import datetime, timezone
from urllib.parse import quote
from xml.sax.saxutils import escape
from fastapi import APIRouter, Response
from app.core.config import settings
from app.services.location_service import list_provinces

router = APIRouter(tags=["seo"])

DISALLOWED_PATHS = ["/auth", "/add-experience", "/edit-experience", "/profile"]


def _url_entry(loc: str, lastmod: str, changefreq: str, priority: str) -> str:
    return (
        "  <url>\n"
        f"    <loc>{escape(loc)}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        f"    <changefreq>{changefreq}</changefreq>\n"
        f"    <priority>{priority}</priority>\n"
        "  </url>\n"
    )


def build_sitemap(base_url: str) -> str:
    """Sitemap covering every province, district and city page."""
    base_url = base_url.rstrip("/")
    now = datetime.now(timezone.utc).isoformat()

    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>\n',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n',
        _url_entry(f"{base_url}/", now, "weekly", "1.0"),
        _url_entry(f"{base_url}/provinces", now, "weekly", "0.9"),
    ]
    for province in list_provinces():
        province_url = f"{base_url}/province/{province['id']}"
        parts.append(_url_entry(province_url, now, "weekly", "0.8"))
        for district in province["districts"]:
            district_url = f"{province_url}/district/{district['id']}"
            parts.append(_url_entry(district_url, now, "weekly", "0.7"))
            for city in district["cities"]:
                parts.append(_url_entry(f"{district_url}/city/{quote(city, safe='')}", now, "weekly", "0.6"))
    parts.append(_url_entry(f"{base_url}/experience", now, "daily", "0.8"))
    parts.append("</urlset>")
    return "".join(parts)


def build_robots_txt(base_url: str) -> str:
    lines = ["User-agent: *", "Allow: /"]
    lines += [f"Disallow: {path}" for path in DISALLOWED_PATHS]
    lines += ["", "# Sitemap", f"Sitemap: {base_url.rstrip('/')}/sitemap.xml", "", "# Crawl-delay", "Crawl-delay: 1", ""]
    return "\n".join(lines)


@router.get("/sitemap.xml")
async def sitemap():
    """Generate XML sitemap."""
    return Response(content=build_sitemap(settings.FRONTEND_URL), media_type="application/xml")


@router.get("/robots.txt")
async def robots():
    """Generate robots.txt."""
    return Response(content=build_robots_txt(settings.FRONTEND_URL), media_type="text/plain")
