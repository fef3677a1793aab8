from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import requests
import structlog
import yaml
from pydantic import ValidationError

from smartflow import settings
from smartflow.errors import TemplateLoadError
from smartflow.models.template import Template, template_from_document

log = structlog.get_logger(__name__)


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def _headers() -> Dict[str, str]:
    return {
        "User-Agent": settings.user_agent(),
        "Accept": "application/json, application/yaml;q=0.9, */*;q=0.1",
    }


def fetch_text(url: str) -> str:
    log.info("fetching_template", url=url)
    try:
        resp = requests.get(url, headers=_headers(), timeout=settings.http_timeout())
        resp.raise_for_status()
    except requests.RequestException as e:
        raise TemplateLoadError(f"could not fetch {url}: {e}") from e
    return resp.text


def read_text(location: str) -> str:
    if is_url(location):
        return fetch_text(location)
    try:
        return Path(location).read_text(encoding="utf-8")
    except OSError as e:
        raise TemplateLoadError(f"could not read {location}: {e}") from e


def load_document(location: str) -> Any:
    # JSON is a subset of YAML, so one parser covers both formats
    text = read_text(location)
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateLoadError(f"{location} is not valid YAML/JSON: {e}") from e


def load_template(location: str) -> Template:
    doc = load_document(location)
    try:
        return template_from_document(doc)
    except (ValueError, ValidationError) as e:
        raise TemplateLoadError(f"{location} is not a valid template: {e}") from e
