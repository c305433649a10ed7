"""
Simple in-memory rate limiter applied to every request at the edge.
"""
import logging
import time
from collections import defaultdict
from typing import Dict
from fastapi import Request, HTTPException, status

from pathwise.core.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS

logger = logging.getLogger(__name__)

# {ip: [timestamp, ...]} per process
rate_limit_store: Dict[str, list] = defaultdict(list)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    # Check for forwarded IP (from proxy/load balancer)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def check_rate_limit(
    request: Request,
    max_requests: int = RATE_LIMIT_MAX_REQUESTS,
    window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
) -> None:
    """
    Check if client has exceeded rate limit.

    Args:
        request: FastAPI request object
        max_requests: Maximum number of requests allowed
        window_seconds: Time window in seconds

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    ip = get_client_ip(request)
    now = time.time()

    cutoff = now - window_seconds
    rate_limit_store[ip] = [
        timestamp for timestamp in rate_limit_store[ip]
        if timestamp > cutoff
    ]

    request_count = len(rate_limit_store[ip])

    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded for IP: {ip} ({request_count} requests in {window_seconds}s)")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests from this IP, please try again later."
        )

    rate_limit_store[ip].append(now)
