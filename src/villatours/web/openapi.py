from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Villa Tours API",
            version="0.1.0",
            summary="Travel package catalog, admin login and PayHere payments",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Admin bearer token (preferred)",
            },
            "AuthTokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "auth_token",
                "description": "Admin token stored in cookie",
            },
            "CsrfToken": {
                "type": "apiKey",
                "in": "header",
                "name": "X-CSRF-Token",
                "description": "Payment session CSRF token from GET /api/payments/csrf-token",
            },
        }

        # Admin auth is only declared on write operations outside the payment tree
        for path, path_item in openapi_schema.get("paths", {}).items():
            payment_path = path.startswith(("/api/payments", "/api/after-payments"))
            for method, operation in path_item.items():
                if payment_path:
                    operation["security"] = [{"CsrfToken": []}] if method.upper() != "GET" else []
                elif method.upper() == "GET" or path == "/api/admin/login":
                    operation["security"] = []
                else:
                    operation["security"] = [{"BearerAuth": []}, {"AuthTokenCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "authentication_error"},
                {"message": "Invalid or missing CSRF token", "type": "csrf_mismatch"},
                {"message": "Package not found", "type": "not_found"},
            ]
        }
    }
