from urllib.parse import unquote, urlparse

from photo_api.app.core.config import Settings


def public_base_url(settings: Settings) -> str:
    base = (settings.public_base_url or "").strip()
    if not base:
        return f"http://localhost:{settings.port}"
    if "://" not in base:
        base = f"https://{base}"
    return base.rstrip("/")


def resolve_public_url(filename: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{filename}"


def extract_filename(url_or_name: str) -> str:
    """Return the last path component of a URL or bare filename, percent-decoded."""
    value = url_or_name.strip()
    parsed = urlparse(value)
    path = parsed.path if (parsed.scheme or parsed.netloc) else value.split("?", 1)[0].split("#", 1)[0]
    return unquote(path.rstrip("/").rsplit("/", 1)[-1])
