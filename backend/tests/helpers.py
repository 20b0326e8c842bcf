# backend/tests/helpers.py
"""Stubs and small helpers shared by the test modules."""

import subprocess
from typing import Any, Dict, List, Optional

from portfolio.integrations.clerk_client import ClerkError

ADMIN_USER_ID = "user_admin"
SUPER_ADMIN_USER_ID = "user_super"
VISITOR_USER_ID = "user_visitor"
TEST_USER_HEADER = "X-Test-User"


def as_user(user_id: str) -> Dict[str, str]:
    return {TEST_USER_HEADER: user_id}


class StubClerk:
    """In-memory stand-in for the Clerk Backend API client."""

    def __init__(self, metadata: Optional[Dict[str, Dict[str, Any]]] = None):
        self.metadata: Dict[str, Dict[str, Any]] = metadata or {}
        self.role_writes: List[tuple[str, List[str]]] = []
        self.fail_with: Optional[int] = None

    def get_public_metadata(self, user_id: str) -> Dict[str, Any]:
        if self.fail_with is not None:
            raise ClerkError("Clerk unavailable", self.fail_with)
        return dict(self.metadata.get(user_id, {}))

    def set_roles(self, user_id: str, roles: List[str]) -> Dict[str, Any]:
        if self.fail_with is not None:
            raise ClerkError("Clerk unavailable", self.fail_with)
        self.role_writes.append((user_id, list(roles)))
        self.metadata.setdefault(user_id, {})["roles"] = list(roles)
        return {"id": user_id}


class StubVimeo:
    def __init__(self, videos: Optional[Dict[str, Dict[str, Any]]] = None):
        self.videos = videos or {}

    def get_video(self, video_id: str) -> Optional[Dict[str, Any]]:
        return self.videos.get(video_id)


class StubStorage:
    def __init__(self, buckets: Optional[List[str]] = None):
        self.buckets = buckets if buckets is not None else ["projects", "icons", "media", "public"]

    def bucket_names(self) -> List[str]:
        return list(self.buckets)


class FakeRunner:
    """Records commands and answers them from a table of canned results."""

    def __init__(self, responses: Optional[Dict[str, subprocess.CompletedProcess]] = None):
        self.responses = responses or {}
        self.calls: List[List[str]] = []

    def __call__(self, args: List[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append(list(args))
        joined = " ".join(str(arg) for arg in args)
        for fragment, result in self.responses.items():
            if fragment in joined:
                return result
        return subprocess.CompletedProcess(args, 0, stdout="", stderr="")


def completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


class StubRegistry:
    """Package registry that answers from a dict without touching the network."""

    def __init__(self, descriptions: Optional[Dict[str, str]] = None):
        self.descriptions = descriptions or {}
        self.requested: List[str] = []

    async def fetch_descriptions(self, names: List[str]) -> Dict[str, str]:
        self.requested.extend(names)
        return {name: self.descriptions[name] for name in names if name in self.descriptions}
