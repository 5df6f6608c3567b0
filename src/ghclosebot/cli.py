from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from ghclosebot.adapters.github.client import GitHubRestClient
from ghclosebot.config.loader import load_config
from ghclosebot.config.models import BotConfig
from ghclosebot.core.errors import AdapterError, ConfigError, WebhookError
from ghclosebot.engine.handler import CommentHandler
from ghclosebot.engine.policy import RepoPolicyStore
from ghclosebot.logging.setup import configure_logging
from ghclosebot.webhook.events import parse_comment_event
from ghclosebot.webhook.server import run_webhook_server


def build_client(config: BotConfig) -> GitHubRestClient:
    if not config.github.token.strip():
        raise AdapterError("github.token must not be empty")
    return GitHubRestClient(
        token=config.github.token,
        api_base=str(config.github.api_base),
        timeout=config.github.timeout_seconds,
    )


def _load(config_path: str) -> BotConfig:
    config = load_config(config_path)
    configure_logging(config.runtime.log_level)
    logging.getLogger("CLI").info(
        "Loaded configuration",
        extra={"mode": config.runtime.mode.value, "policies": len(config.policies)},
    )
    return config


def main() -> None:
    parser = argparse.ArgumentParser(description="Close and reopen issues and pull requests from comments")
    parser.add_argument("--config", required=True, help="Path to config YAML file")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the webhook server")
    sub.add_parser("check-config", help="Validate the configuration and exit")
    event_p = sub.add_parser("handle-event", help="Handle a single webhook payload read from a file")
    event_p.add_argument("--event", default="issue_comment", help="GitHub event name (X-GitHub-Event)")
    event_p.add_argument("--payload", required=True, help="Path to the JSON payload")

    args = parser.parse_args()
    client = None
    try:
        config = _load(args.config)
        if args.command == "check-config":
            RepoPolicyStore.from_config(config.policies)
            print(f"Configuration OK ({len(config.policies)} policies)")
            return

        client = build_client(config)
        handler = CommentHandler.from_config(config, client)
        if args.command == "serve":
            run_webhook_server(config.webhook, handler)
        elif args.command == "handle-event":
            payload = json.loads(Path(args.payload).read_text(encoding="utf-8"))
            event = parse_comment_event(args.event, payload)
            if event is None:
                print("Event ignored")
                return
            action = handler.handle(event)
            print(f"Handled: {type(action).__name__}")
    except (ConfigError, AdapterError, WebhookError, OSError, json.JSONDecodeError) as exc:
        logging.getLogger("CLI").error("Fatal error: %s", exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        logging.getLogger("CLI").info("Interrupted")
    finally:
        if client is not None:
            client.close()


if __name__ == "__main__":
    main()
