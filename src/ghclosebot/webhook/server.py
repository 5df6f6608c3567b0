"""Minimal webhook HTTP server.

Requests are served one at a time, so each comment event is handled to
completion before the next delivery is read.
"""

from __future__ import annotations

import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any

from ghclosebot.config.models import WebhookConfig
from ghclosebot.core.errors import WebhookError
from ghclosebot.engine.handler import CommentHandler
from ghclosebot.webhook.events import parse_comment_event, verify_signature

logger = logging.getLogger("Webhook")


class WebhookRequestHandler(BaseHTTPRequestHandler):
    """Handle GET /health and POST to the configured webhook path."""

    comment_handler: CommentHandler
    webhook: WebhookConfig

    def do_GET(self) -> None:
        if self.path in {"/", "/health"}:
            self._reply(200, {"status": "ok"})
            return
        self._reply(404, {"error": "not found"})

    def do_POST(self) -> None:
        if self.path != self.webhook.path:
            self._reply(404, {"error": "not found"})
            return

        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = -1
        if length < 0:
            logger.warning("Rejected webhook with invalid Content-Length")
            self._reply(400, {"error": "invalid content length"})
            return
        body = self.rfile.read(length) if length else b""
        if not verify_signature(self.webhook.secret, body, self.headers.get("X-Hub-Signature-256")):
            logger.warning("Rejected webhook with invalid signature")
            self._reply(401, {"error": "invalid signature"})
            return

        event_name = self.headers.get("X-GitHub-Event", "")
        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
            event = parse_comment_event(event_name, payload)
        except (UnicodeDecodeError, json.JSONDecodeError, WebhookError) as exc:
            logger.warning("Rejected malformed webhook", extra={"event": event_name, "error": str(exc)})
            self._reply(400, {"error": "malformed payload"})
            return

        if event is None:
            self._reply(202, {"handled": False})
            return

        action = self.comment_handler.handle(event)
        self._reply(200, {"handled": True, "action": type(action).__name__})

    def _reply(self, status: int, payload: dict[str, Any]) -> None:
        data = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(format, *args)


def build_server(config: WebhookConfig, comment_handler: CommentHandler) -> HTTPServer:
    handler_cls = type(
        "BoundWebhookRequestHandler",
        (WebhookRequestHandler,),
        {"comment_handler": comment_handler, "webhook": config},
    )
    return HTTPServer((config.host, config.port), handler_cls)


def run_webhook_server(config: WebhookConfig, comment_handler: CommentHandler) -> None:
    server = build_server(config, comment_handler)
    logger.info("Webhook server listening", extra={"host": config.host, "port": config.port})
    try:
        server.serve_forever()
    finally:
        server.server_close()
