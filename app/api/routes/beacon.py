import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from app.core.config import get_query_policy, settings
from app.core.errors import QueryValidationError, ServerConfigError
from app.core.predicate import build_predicate
from app.core.query import QueryMode, QueryPolicy, validate_query
from app.db.executor import QueryExecutor, get_executor
from app.schemas.beacon import (
    BeaconAlleleRequest,
    BeaconAlleleResponse,
    BeaconError,
    BeaconInfo,
    LegacyQueryRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def parse_request(request: Request, mode: QueryMode) -> Union[BeaconAlleleRequest, LegacyQueryRequest]:
    """
    Read the query from the URL (GET) or from a JSON body (POST).

    Raises ValueError (including pydantic's ValidationError and JSON
    decoding errors) when the input cannot be read.
    """
    model = LegacyQueryRequest if mode is QueryMode.LEGACY else BeaconAlleleRequest
    if request.method == "GET":
        return model.model_validate(dict(request.query_params))
    try:
        body = await request.json()
    except ValueError as e:
        raise ValueError(f"decoding request body: {e}") from e
    return model.model_validate(body)


def _xml(root: ET.Element) -> Response:
    ET.indent(root)
    return Response(content=ET.tostring(root, encoding="unicode"), media_type="application/xml")


def legacy_response(exists: bool) -> Response:
    root = ET.Element("BEACONResponse")
    ET.SubElement(root, "exists").text = "true" if exists else "false"
    return _xml(root)


def legacy_about(info: Dict[str, Any]) -> Response:
    root = ET.Element("BEACONInfo")
    for key in ("id", "name", "apiVersion", "dataset"):
        ET.SubElement(root, key).text = str(info.get(key, ""))
    organization = ET.SubElement(root, "organization")
    for key in ("id", "name"):
        ET.SubElement(organization, key).text = str(info.get("organization", {}).get(key, ""))
    return _xml(root)


def allele_response(
    info: Dict[str, Any],
    allele_request: BeaconAlleleRequest,
    exists: Optional[bool] = None,
    status_code: int = 200,
    message: Optional[str] = None,
) -> JSONResponse:
    error = None
    if message is not None:
        error = BeaconError(errorCode=str(status_code), errorMessage=message)
    body = BeaconAlleleResponse(
        beaconId=info["id"],
        apiVersion=info["apiVersion"],
        alleleRequest=allele_request,
        exists=exists,
        error=error,
    )
    return JSONResponse(content=body.model_dump(), status_code=status_code)


def server_info(check: bool = True) -> Dict[str, Any]:
    try:
        if check:
            settings.validate_server_config()
        return settings.beacon_info()
    except ServerConfigError as e:
        logger.error("Server misconfigured: %s", e)
        raise HTTPException(status_code=500, detail=f"validating server configuration: {e}")


@router.get("/", response_model=BeaconInfo)
async def about(policy: QueryPolicy = Depends(get_query_policy)):
    """Information about the beacon and the API it implements."""
    info = server_info(check=False)
    if policy.mode is QueryMode.LEGACY:
        return legacy_about(info)
    return info


@router.api_route("/query", methods=["GET", "POST"])
async def query(
    request: Request,
    executor: QueryExecutor = Depends(get_executor),
    policy: QueryPolicy = Depends(get_query_policy),
):
    """
    Does an allele matching the request exist in the dataset?

    Accepts URL parameters on GET and a JSON body on POST. Field names depend
    on QUERY_MODE: referenceName/referenceBases/alternateBases/start/end/
    startMin/startMax/endMin/endMax, or chromosome/allele/coordinate.
    """
    legacy = policy.mode is QueryMode.LEGACY
    info = server_info()

    try:
        allele_request = await parse_request(request, policy.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"parsing input: {e}")

    allele_query = allele_request.to_query()
    try:
        validate_query(allele_query, policy)
    except QueryValidationError as e:
        logger.info("Rejected query (%s): %s", e.kind, e.detail)
        message = f"validating input: {e.detail}"
        if legacy:
            raise HTTPException(status_code=400, detail=message)
        return allele_response(info, allele_request, status_code=400, message=message)

    predicate = build_predicate(allele_query, policy)
    dataset = info["dataset"]
    try:
        count = await executor.count(predicate, dataset, settings.GOOGLE_CLOUD_PROJECT or None)
    except Exception as e:
        logger.exception("Query on %s failed", dataset)
        message = f"computing result: {e}"
        if legacy:
            raise HTTPException(status_code=500, detail=message)
        return allele_response(info, allele_request, status_code=500, message=message)

    exists = count > 0
    if legacy:
        return legacy_response(exists)
    return allele_response(info, allele_request, exists=exists)
