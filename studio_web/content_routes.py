"""
Content resource endpoints.

Reads are public. Every mutation requires an admin token and goes through
``ContentService``, which validates before anything is written.

- hero, story, locations, contact, process: whole-document ``PUT``
- work (``projects``) and faq (``items``): whole-document ``PUT`` plus item
  ``POST``/``PUT /{id}``/``DELETE /{id}``
- process steps live under ``/api/process/steps``
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from studio_cms.auth.tokens import TokenClaims
from studio_cms.services.content_service import ContentService
from studio_cms.services.resources import RESOURCES
from studio_cms.services.validator import validate_id
from studio_cms.utils.exceptions import InvalidJSONError

from .auth_deps import require_admin
from .responses import success_response

router = APIRouter(prefix="/api", tags=["content"])

# Item routes sit directly under the resource for these kinds
ITEM_ROUTE_KINDS = ("work", "faq")


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidJSONError()


def _register_document_routes(kind: str) -> None:
    label = RESOURCES[kind].label

    async def get_document(service: ContentService = Depends(get_content_service)):
        document = await run_in_threadpool(service.get_document, kind)
        return success_response(data=document)

    async def replace_document(
        request: Request,
        service: ContentService = Depends(get_content_service),
        claims: TokenClaims = Depends(require_admin),
    ):
        payload = await read_json_body(request)
        document = await run_in_threadpool(service.replace_document, kind, payload)
        return success_response(data=document, message=f"{label} data updated successfully")

    async def replace_document_by_id(
        doc_id: str,
        request: Request,
        service: ContentService = Depends(get_content_service),
        claims: TokenClaims = Depends(require_admin),
    ):
        validate_id(doc_id)
        return await replace_document(request, service, claims)

    router.add_api_route(f"/{kind}", get_document, methods=["GET"], name=f"get_{kind}")
    router.add_api_route(f"/{kind}", replace_document, methods=["PUT"], name=f"replace_{kind}")
    if kind not in ITEM_ROUTE_KINDS:
        router.add_api_route(
            f"/{kind}/{{doc_id}}", replace_document_by_id, methods=["PUT"], name=f"replace_{kind}_by_id"
        )


def _register_item_routes(kind: str, base_path: str) -> None:
    item_label = RESOURCES[kind].item_label

    async def add_item(
        request: Request,
        service: ContentService = Depends(get_content_service),
        claims: TokenClaims = Depends(require_admin),
    ):
        payload = await read_json_body(request)
        item = await run_in_threadpool(service.add_item, kind, payload)
        return success_response(data=item, message=f"{item_label} created successfully")

    async def update_item(
        item_id: str,
        request: Request,
        service: ContentService = Depends(get_content_service),
        claims: TokenClaims = Depends(require_admin),
    ):
        parsed_id = validate_id(item_id)
        payload = await read_json_body(request)
        item = await run_in_threadpool(service.update_item, kind, parsed_id, payload)
        return success_response(data=item, message=f"{item_label} updated successfully")

    async def delete_item(
        item_id: str,
        service: ContentService = Depends(get_content_service),
        claims: TokenClaims = Depends(require_admin),
    ):
        parsed_id = validate_id(item_id)
        removed = await run_in_threadpool(service.delete_item, kind, parsed_id)
        return success_response(data=removed, message=f"{item_label} deleted successfully")

    router.add_api_route(base_path, add_item, methods=["POST"], name=f"add_{kind}_item")
    router.add_api_route(f"{base_path}/{{item_id}}", update_item, methods=["PUT"], name=f"update_{kind}_item")
    router.add_api_route(f"{base_path}/{{item_id}}", delete_item, methods=["DELETE"], name=f"delete_{kind}_item")


# Process steps first so "/process/steps/..." never reaches "/process/{doc_id}"
_register_item_routes("process", "/process/steps")
for _kind in RESOURCES:
    _register_document_routes(_kind)
for _kind in ITEM_ROUTE_KINDS:
    _register_item_routes(_kind, f"/{_kind}")
