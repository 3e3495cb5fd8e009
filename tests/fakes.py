"""
Fake machine learning servers for tests, built on httpx.MockTransport.
"""
import json
from typing import Callable, Dict, List

import httpx


class FakeServers:
    """
    Routes requests by host to canned behaviours and records every call.

    Each host maps to a callable taking the request and returning a
    response (or raising an httpx error to simulate a network failure).
    """

    def __init__(self):
        self.hosts: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.calls.append(request)
        behaviour = self.hosts.get(request.url.host)
        if behaviour is None:
            raise httpx.ConnectError("Name or service not known", request=request)
        return behaviour(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, method: str) -> List[httpx.Request]:
        return [call for call in self.calls if call.method == method]


def live_server(predict_body=None, predict_status: int = 200):
    """Server that answers probes with 200 and predictions with a canned body."""
    def behaviour(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json={"message": "ok"})
        return httpx.Response(predict_status, json=predict_body if predict_body is not None else {})
    return behaviour


def status_server(status: int):
    """Server whose probe answers with the given status."""
    def behaviour(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status)
    return behaviour


def timeout_server(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectTimeout("timed out", request=request)


def form_fields(request: httpx.Request) -> Dict[str, bytes]:
    """Parse a multipart request body into {field name: raw value}."""
    content_type = request.headers["content-type"]
    boundary = content_type.split("boundary=")[1].encode()
    fields = {}
    for part in request.content.split(b"--" + boundary):
        if b"\r\n\r\n" not in part:
            continue
        headers, value = part.split(b"\r\n\r\n", 1)
        name = headers.split(b'name="')[1].split(b'"')[0].decode()
        fields[name] = value[:-2] if value.endswith(b"\r\n") else value
    return fields


def entries_of(request: httpx.Request) -> dict:
    return json.loads(form_fields(request)["entries"])

