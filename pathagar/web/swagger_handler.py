"""Serving of the API description and a browser viewer for it."""

from __future__ import annotations

import json
import os
from http import HTTPStatus
from pathlib import Path

from flask import Response

SWAGGER_PATHS = (
    "docs/swagger.yaml",
    "./docs/swagger.yaml",
    "../docs/swagger.yaml",
    "amar-pathagar-backend/docs/swagger.yaml",
)

_VIEWER_TITLE = "Amar Pathagar API Documentation"
_VIEWER_ASSETS = "https://unpkg.com/swagger-ui-dist@5.10.5"
_SPEC_URL = "/docs/swagger.yaml"


def _viewer_page() -> str:
    stylesheet = f"{_VIEWER_ASSETS}/swagger-ui.css"
    scripts = [
        f"{_VIEWER_ASSETS}/swagger-ui-bundle.js",
        f"{_VIEWER_ASSETS}/swagger-ui-standalone-preset.js",
    ]
    script_tags = "\n".join(f'<script src="{src}"></script>' for src in scripts)
    options = ",\n".join(
        [
            f"url: {json.dumps(_SPEC_URL)}",
            f"dom_id: {json.dumps('#swagger-ui')}",
            "deepLinking: true",
            "presets: [SwaggerUIBundle.presets.apis, SwaggerUIStandalonePreset]",
            "plugins: [SwaggerUIBundle.plugins.DownloadUrl]",
            f"layout: {json.dumps('StandaloneLayout')}",
        ]
    )
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"<title>{_VIEWER_TITLE}</title>",
            f'<link rel="stylesheet" type="text/css" href="{stylesheet}">',
            "<style>body { margin: 0; padding: 0; }</style>",
            "</head>",
            "<body>",
            '<div id="swagger-ui"></div>',
            script_tags,
            "<script>",
            f"window.onload = () => {{ window.ui = SwaggerUIBundle({{\n{options}\n}}); }};",
            "</script>",
            "</body>",
            "</html>",
            "",
        ]
    )


def serve_swagger_yaml() -> Response:
    """The first swagger.yaml found relative to the working directory, or a 404."""
    for candidate in SWAGGER_PATHS:
        try:
            data = Path(candidate).read_bytes()
        except OSError:
            continue
        return Response(data, status=int(HTTPStatus.OK), content_type="application/x-yaml")

    body = {
        "error": "swagger.yaml not found",
        "working_directory": os.getcwd(),
        "tried_paths": list(SWAGGER_PATHS),
    }
    return Response(
        json.dumps(body), status=int(HTTPStatus.NOT_FOUND), mimetype="application/json"
    )


def serve_swagger_ui() -> Response:
    """An HTML page that renders /docs/swagger.yaml with Swagger UI."""
    return Response(
        _viewer_page().encode("utf-8"),
        status=int(HTTPStatus.OK),
        content_type="text/html; charset=utf-8",
    )