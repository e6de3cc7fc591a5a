import json
import logging
import traceback
from aiohttp import web
import sentry_sdk
from social.graze.didroute.app.config import (
    ResolverAppKey,
    ResolverContextAppKey,
    SettingsAppKey,
)
from social.graze.didroute.exceptions import (
    InconsistentRedirect,
    InvalidDid,
    RedirectLoopDetected,
    ResolutionTimeout,
    UnsupportedMethod,
)
from social.graze.didroute.model import ErrorKind

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.not_found: 404,
    ErrorKind.invalid_did: 400,
    ErrorKind.invalid_did_document: 500,
    ErrorKind.internal_error: 500,
}


def error_response(status: int, error: str, message: str) -> web.Response:
    return web.json_response(
        {"didResolutionMetadata": {"error": error, "message": message}},
        status=status,
    )


async def handle_internal_alive(request: web.Request):
    return web.Response(status=200)


async def handle_resolve_identifier(request: web.Request):
    did = request.match_info["did"]
    resolver = request.app[ResolverAppKey]
    context = request.app[ResolverContextAppKey]

    try:
        result = await resolver.resolve(context, did)
    except InvalidDid as e:
        return error_response(400, ErrorKind.invalid_did.value, str(e))
    except UnsupportedMethod as e:
        return error_response(501, "methodNotSupported", str(e))
    except (InconsistentRedirect, RedirectLoopDetected) as e:
        logger.warning("Rejected redirect while resolving %s: %s", did, e)
        sentry_sdk.capture_exception(e)
        return error_response(502, type(e).__name__, str(e))
    except ResolutionTimeout as e:
        return error_response(504, type(e).__name__, str(e))
    except Exception as e:
        logger.error(
            f"Unexpected error resolving {did}: {type(e).__name__}: {str(e)}\n"
            f"Traceback:\n{traceback.format_exc()}"
        )
        sentry_sdk.capture_exception(e)

        settings = request.app.get(SettingsAppKey)
        if settings and getattr(settings, "debug", False):
            message = f"{type(e).__name__}: {str(e)}"
        else:
            message = type(e).__name__
        raise web.HTTPInternalServerError(
            body=json.dumps(
                {
                    "didResolutionMetadata": {
                        "error": ErrorKind.internal_error.value,
                        "message": message,
                    }
                }
            ),
            content_type="application/json",
        )

    status = 200
    if result.resolution_metadata.error is not None:
        status = ERROR_STATUS.get(result.resolution_metadata.error, 500)
    elif result.deactivated:
        status = 410

    return web.json_response(
        result.serialize(),
        status=status,
        content_type=result.resolution_metadata.content_type or "application/json",
    )
