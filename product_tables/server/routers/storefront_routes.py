"""Storefront bootstrap: the Script Manager loader and the hosted widget page."""

import json

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, Response

router = APIRouter(tags=["storefront"])

WIDGET_RUNTIME_PATH = "/web/storefront/widget-loader.js"

_LOADER_TEMPLATE = """// Classic entry that works with BigCommerce Script Manager (non-module)
(function(){
  if (window.__ProductTableWidgetLoaderInjected) return;
  window.__ProductTableWidgetLoaderInjected = true;
  try {
    var s = document.createElement('script');
    s.type = 'module';
    s.src = %(runtime_src)s;
    document.head.appendChild(s);
  } catch (e) {
    console.error('Failed to inject widget loader module', e);
  }
})();
"""

_WIDGET_PAGE_TEMPLATE = """<!doctype html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Product Table Widget</title>
    <style>html,body,#root{height:100%%;margin:0;padding:0;background:transparent}</style>
  </head>
  <body>
    <div id="root"></div>
    <script>window.__WIDGET_CONFIG_B64__ = %(config)s;</script>
    <script type="module">
      try {
        const raw = window.__WIDGET_CONFIG_B64__ || "";
        window.__ProductTableWidgetConfig__ = raw ? JSON.parse(atob(raw)) : {};
      } catch (e) {
        console.error('Failed to parse widget config', e);
        window.__ProductTableWidgetConfig__ = {};
      }
      import(%(runtime_src)s);
    </script>
  </body>
</html>
"""


def _js_string(value: str) -> str:
    """JSON-encode for inline <script>; '</' is escaped so the value cannot close the tag."""
    return json.dumps(value).replace("</", "<\\/")


def _runtime_src(request: Request) -> str:
    return str(request.base_url).rstrip("/") + WIDGET_RUNTIME_PATH


@router.get("/widget-loader.js")
async def widget_loader(request: Request) -> Response:
    body = _LOADER_TEMPLATE % {"runtime_src": _js_string(_runtime_src(request))}
    return Response(content=body, media_type="application/javascript")


@router.get("/storefront/widget.html")
async def widget_page(request: Request, config: str = Query("")) -> HTMLResponse:
    """Hosted widget runtime; config is a base64-encoded JSON blob decoded in the page."""
    html = _WIDGET_PAGE_TEMPLATE % {
        "config": _js_string(config),
        "runtime_src": _js_string(_runtime_src(request)),
    }
    return HTMLResponse(content=html, headers={"Cache-Control": "public, max-age=60"})
