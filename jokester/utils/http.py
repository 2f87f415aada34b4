"""Small request helpers shared by routers and boundaries."""

from fastapi import Request


def wants_json(request: Request) -> bool:
    """True when the client asked for JSON instead of a rendered page."""
    return "application/json" in request.headers.get("accept", "")
