#!/usr/bin/env python3
"""
Smoke test for a running server: initialize, list tools, call
get-alerts and generate_corepalette_colors.

Usage:
    python client/test-client.py [http://localhost:3000/mcp]
"""

import json
import sys
import time

import requests

SERVER_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000/mcp"

session_id = None


def parse_body(text: str):
    """Plain JSON for error cases, otherwise the last SSE `data:` frame."""
    if text.lstrip().startswith("{"):
        return json.loads(text)

    result = None
    for line in text.splitlines():
        if line.startswith("data: "):
            data = line[len("data: "):].strip()
            if data and data != "[DONE]":
                result = json.loads(data)
    return result


def mcp_request(method: str, params: dict = None):
    global session_id
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json, text/event-stream",
    }
    if session_id:
        headers["mcp-session-id"] = session_id

    response = requests.post(
        SERVER_URL,
        headers=headers,
        json={
            "jsonrpc": "2.0",
            "method": method,
            "params": params or {},
            "id": int(time.time() * 1000),
        },
        timeout=30,
    )
    session_id = response.headers.get("mcp-session-id", session_id)
    return parse_body(response.text)


def mcp_notify(method: str):
    """Send a JSON-RPC notification; the server answers 202 with no body."""
    response = requests.post(
        SERVER_URL,
        headers={
            "Content-Type": "application/json",
            "Accept": "application/json, text/event-stream",
            "mcp-session-id": session_id,
        },
        json={"jsonrpc": "2.0", "method": method},
        timeout=30,
    )
    response.raise_for_status()


def main():
    print("🚀 Testing MCP Server\n")

    print("1. Initializing connection...")
    init_result = mcp_request(
        "initialize",
        {
            "protocolVersion": "2024-11-05",
            "capabilities": {},
            "clientInfo": {"name": "test-client", "version": "1.0.0"},
        },
    )
    print("✅ Initialized:", json.dumps(init_result, indent=2), "\n")
    if session_id:
        mcp_notify("notifications/initialized")

    print("2. Listing tools...")
    tools_result = mcp_request("tools/list")
    print("✅ Tools:", json.dumps(tools_result, indent=2), "\n")

    print("3. Getting weather alerts for CA...")
    alerts_result = mcp_request(
        "tools/call", {"name": "get-alerts", "arguments": {"state": "CA"}}
    )
    print("✅ Alerts result:", json.dumps(alerts_result, indent=2), "\n")

    print("4. Generating CorePalette colors with seed color #FF0062...")
    color_result = mcp_request(
        "tools/call",
        {"name": "generate_corepalette_colors", "arguments": {"seedColor": "#FF0062"}},
    )
    if color_result and color_result.get("error"):
        print("❌ Error:", color_result["error"]["message"])
    else:
        text = color_result["result"]["content"][0]["text"]
        print("✅ CorePalette Colors:")
        print(json.dumps(json.loads(text), indent=2))

    print("\n✅ All tests passed! Your MCP server is working correctly.")


if __name__ == "__main__":
    main()
