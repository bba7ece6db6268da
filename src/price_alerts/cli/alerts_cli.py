"""CLI to exercise the price-alert API and listen to real-time notifications.

Usage:
  alerts-cli health
  alerts-cli --token $TOKEN alerts create <product-id> 85000 --type below
  alerts-cli --token $TOKEN alerts list --all
  alerts-cli --token $ADMIN_TOKEN price-update <product-id> 84999
  alerts-cli --token $TOKEN listen --messages 5
"""
import argparse
import asyncio
import json
import os
import sys

import httpx
import websockets


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_alerts_list(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/api/notifications/alerts", params={"includeInactive": args.all})
    r.raise_for_status()
    data = r.json()
    print(f"Found {data['count']} alerts")
    print_json(data["data"])
    return 0


def cmd_alerts_create(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {
        "productId": args.product_id,
        "targetPrice": args.target_price,
        "currency": args.currency,
        "alertType": args.type,
    }
    if args.threshold is not None:
        body["threshold"] = args.threshold
    r = client.post("/api/notifications/alerts", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_alerts_update(client: httpx.Client, args: argparse.Namespace) -> int:
    body: dict[str, object] = {}
    if args.target_price is not None:
        body["targetPrice"] = args.target_price
    if args.type is not None:
        body["alertType"] = args.type
    if args.threshold is not None:
        body["threshold"] = args.threshold
    if args.active is not None:
        body["isActive"] = args.active == "true"
    r = client.put(f"/api/notifications/alerts/{args.alert_id}", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_alerts_delete(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.delete(f"/api/notifications/alerts/{args.alert_id}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_preferences_get(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/user-preferences")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_preferences_set(client: httpx.Client, args: argparse.Namespace) -> int:
    body: dict[str, object] = {}
    if args.email is not None:
        body["notificationEmail"] = args.email == "on"
    if args.push is not None:
        body["notificationPush"] = args.push == "on"
    if args.quiet_hours is not None:
        if args.quiet_hours == "off":
            body["quietHoursStart"] = None
            body["quietHoursEnd"] = None
        else:
            start, _, end = args.quiet_hours.partition("-")
            body["quietHoursStart"] = start
            body["quietHoursEnd"] = end
    r = client.patch("/api/user-preferences", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_stats(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/notifications/stats")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_price_update(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post(
        "/api/notifications/price-updates",
        json={"productId": args.product_id, "currentPrice": args.current_price},
    )
    r.raise_for_status()
    print_json(r.json())
    return 0


def _listen(ws_url: str, token: str | None, duration: float | None, max_messages: int | None) -> int:
    """Connect to /ws, authenticate if a token is given, print incoming messages."""
    count = 0

    async def run() -> None:
        nonlocal count
        async with websockets.connect(ws_url) as ws:
            if token:
                await ws.send(json.dumps({"type": "auth", "token": token}))
            print(f"Listening on {ws_url} (max_messages={max_messages or '∞'})", file=sys.stderr)
            async for raw in ws:
                count += 1
                print_json(json.loads(raw))
                if max_messages and count >= max_messages:
                    return

    async def run_with_timeout() -> None:
        if duration and duration > 0:
            try:
                await asyncio.wait_for(run(), timeout=duration)
            except asyncio.TimeoutError:
                print(f"Stopped after {duration}s ({count} messages)", file=sys.stderr)
        else:
            await run()

    try:
        asyncio.run(run_with_timeout())
    except KeyboardInterrupt:
        print(f"\nStopped by user ({count} messages)", file=sys.stderr)
        return 130
    except (OSError, websockets.WebSocketException) as e:
        print(f"Listen error: {e}", file=sys.stderr)
        return 1
    return 0


def _ws_url(base_url: str) -> str:
    if base_url.startswith("https://"):
        return "wss://" + base_url[len("https://"):] + "/ws"
    if base_url.startswith("http://"):
        return "ws://" + base_url[len("http://"):] + "/ws"
    return base_url + "/ws"


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Exercise the price-alert API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8001",
        help="API base URL (default: http://localhost:8001)",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("ALERTS_TOKEN"),
        help="Bearer token (default: $ALERTS_TOKEN)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / health check")

    # alerts
    alerts = subparsers.add_parser("alerts", help="Price alerts (/api/notifications/alerts)")
    alerts_sub = alerts.add_subparsers(dest="alerts_cmd", required=True)
    p = alerts_sub.add_parser("list", help="GET /alerts")
    p.add_argument("--all", action="store_true", help="Include inactive alerts")
    p = alerts_sub.add_parser("create", help="POST /alerts")
    p.add_argument("product_id", help="Catalog product id")
    p.add_argument("target_price", type=int, help="Target price in minor units (cents)")
    p.add_argument("--currency", default="USD")
    p.add_argument("--type", choices=["below", "above", "percentage"], default="below")
    p.add_argument("--threshold", type=float, default=None, help="Percent (percentage alerts)")
    p = alerts_sub.add_parser("update", help="PUT /alerts/{id}")
    p.add_argument("alert_id")
    p.add_argument("--target-price", type=int, default=None)
    p.add_argument("--type", choices=["below", "above", "percentage"], default=None)
    p.add_argument("--threshold", type=float, default=None)
    p.add_argument("--active", choices=["true", "false"], default=None)
    p = alerts_sub.add_parser("delete", help="DELETE /alerts/{id}")
    p.add_argument("alert_id")

    # preferences
    prefs = subparsers.add_parser("preferences", help="Notification preferences")
    prefs_sub = prefs.add_subparsers(dest="preferences_cmd", required=True)
    prefs_sub.add_parser("get", help="GET /api/user-preferences")
    p = prefs_sub.add_parser("set", help="PATCH /api/user-preferences")
    p.add_argument("--email", choices=["on", "off"], default=None)
    p.add_argument("--push", choices=["on", "off"], default=None)
    p.add_argument("--quiet-hours", default=None, metavar="HH:MM-HH:MM|off")

    subparsers.add_parser("stats", help="GET /api/notifications/stats (admin)")

    p = subparsers.add_parser("price-update", help="POST /api/notifications/price-updates (admin)")
    p.add_argument("product_id")
    p.add_argument("current_price", type=int, help="Current price in minor units (cents)")

    p = subparsers.add_parser("listen", help="Print real-time notifications from /ws")
    p.add_argument("--duration", type=float, default=None, metavar="SECS",
                   help="Stop after SECS seconds (default: run until Ctrl+C)")
    p.add_argument("--messages", type=int, default=None, metavar="N",
                   help="Stop after N messages (default: no limit)")

    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    handlers = {
        "health": cmd_health,
        "alerts": {
            "list": cmd_alerts_list,
            "create": cmd_alerts_create,
            "update": cmd_alerts_update,
            "delete": cmd_alerts_delete,
        },
        "preferences": {
            "get": cmd_preferences_get,
            "set": cmd_preferences_set,
        },
        "stats": cmd_stats,
        "price-update": cmd_price_update,
    }

    cmd = args.command
    if cmd == "listen":
        return _listen(_ws_url(base_url), args.token, args.duration, args.messages)
    handler = handlers[cmd]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{cmd}_cmd")]

    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout, headers=headers) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
