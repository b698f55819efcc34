"""Pushing service images to their docker registry."""

from __future__ import annotations

import asyncio
import base64
import json
import re
import sys
from pathlib import Path
from typing import Any, TextIO

import aiodocker

from hzn_sdk.errors import FileIOError, GeneralError, InputError, ParseError

DEFAULT_DOCKER_CONFIG = Path.home() / ".docker" / "config.json"

_DIGEST_PATTERN = re.compile(r"\s+digest:\s+(\S+)\s+size:")


def _auth_config(server: str, entry: Any) -> dict[str, str]:
    if not isinstance(entry, dict):
        raise ParseError(f"invalid docker credentials entry for {server}")
    config = {"serveraddress": server}
    encoded = entry.get("auth")
    if encoded:
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except ValueError as exc:
            raise ParseError(f"invalid docker credentials for {server}: {exc}") from exc
        username, _, password = decoded.partition(":")
        config.update(username=username, password=password)
    if entry.get("identitytoken"):
        config["identitytoken"] = entry["identitytoken"]
    return config


def get_docker_auth(domain: str, *, config_path: str | Path | None = None) -> dict[str, str]:
    """Find the registry credentials for ``domain`` in the docker client config.

    An empty domain means docker hub. The result is the auth config the
    docker engine expects: username, password and server address.
    """
    path = Path(config_path) if config_path else DEFAULT_DOCKER_CONFIG
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise FileIOError(f"{path} not found") from exc
    except OSError as exc:
        raise FileIOError(f"reading {path} failed: {exc}") from exc
    except ValueError as exc:
        raise ParseError(f"failed to unmarshal bytes from {path}: {exc}") from exc

    auths = config.get("auths") if isinstance(config, dict) else None
    for domain_name, entry in (auths or {}).items():
        if domain_name == domain or (domain == "" and "docker.io/" in domain_name):
            return _auth_config(domain_name, entry)
    raise FileIOError(f"unable to find docker credentials for {domain}")


def _describe(event: dict[str, Any]) -> str:
    status = event.get("status", "")
    if event.get("id"):
        return f"{event['id']}: {status}"
    return status


async def _push(
    repository: str,
    tag: str,
    auth: dict[str, str],
    image: str,
    out: TextIO,
) -> str:
    lines: list[str] = []
    digest = ""
    async with aiodocker.Docker() as docker:
        async for event in docker.images.push(repository, auth=auth, tag=tag or None, stream=True):
            if event.get("error"):
                raise GeneralError(f"unable to push docker image {image}: {event['error']}")
            aux = event.get("aux")
            if isinstance(aux, dict) and aux.get("Digest"):
                digest = aux["Digest"]
            # Progress bar updates repeat for every chunk uploaded.
            if event.get("status") and not event.get("progress"):
                line = _describe(event)
                print(line, file=out)
                lines.append(line)

    if digest:
        return digest
    match = _DIGEST_PATTERN.search("\n".join(lines))
    if match is None:
        raise GeneralError("could not find the image digest in the docker push output")
    return match.group(1)


def push_docker_image(
    domain: str,
    path: str,
    tag: str,
    *,
    config_path: str | Path | None = None,
    stdout: TextIO | None = None,
) -> str:
    """Push an image, echoing the engine's progress, and return the repo digest.

    No timeout is set: the operator interrupts a push that looks stuck.
    """
    out = stdout or sys.stdout
    repository = path if not domain else f"{domain}/{path}"
    image = f"{repository}:{tag}" if tag else repository
    print(f"Pushing {repository}:{tag}...", file=out)

    try:
        auth = get_docker_auth(domain, config_path=config_path)
    except (FileIOError, ParseError) as exc:
        raise InputError(
            f"could not get docker credentials from ~/.docker/config.json: {exc}. Maybe you need "
            "to run 'docker login ...' to provide credentials for the image registry."
        ) from exc

    try:
        return asyncio.run(_push(repository, tag, auth, image, out))
    except (aiodocker.exceptions.DockerError, OSError) as exc:
        raise GeneralError(f"unable to push docker image {image}: {exc}") from exc
