"""HTTP applications exposing the user and sale services."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Sequence
from typing import Any

from flask import Flask, Response, jsonify, request

from .errors import (
    InvalidInputError,
    NotFoundError,
    SaleNotFoundError,
    ServiceError,
    TransactionInvalidError,
)
from .sales import Sale, SaleService, SaleUpdate
from .users import User, UserService, UserUpdate

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


class _BadRequest(Exception):
    """The request body could not be bound to the expected fields."""


def _error(exc: Exception, status: int) -> tuple[Response, int]:
    return jsonify({"error": str(exc)}), status


def _bind_json(fields: dict[str, tuple[type, ...]]) -> dict[str, Any]:
    """Decode the JSON body and check the types of the known fields.

    Unknown keys are ignored and null values count as absent.
    """
    raw = request.get_data(as_text=True)
    if not raw.strip():
        raise _BadRequest("request body is empty")
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise _BadRequest(f"invalid JSON: {exc}") from None
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise _BadRequest("request body must be a JSON object")

    bound: dict[str, Any] = {}
    for name, types in fields.items():
        value = data.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, types):
            raise _BadRequest(f"field {name!r} has the wrong type")
        bound[name] = value
    return bound


def _register_common(app: Flask) -> None:
    app.register_error_handler(_BadRequest, lambda exc: _error(exc, 400))

    @app.get("/ping")
    def ping() -> Response:
        return jsonify({"message": "pong"})


def create_users_app(user_service: UserService | None = None) -> Flask:
    """Build the application serving user CRUD endpoints."""
    service = user_service if user_service is not None else UserService()
    app = Flask("usersales.users")
    _register_common(app)

    @app.post("/users")
    def create_user():
        body = _bind_json({"name": (str,), "address": (str,), "nickname": (str,)})
        user = User(
            name=body.get("name", ""),
            address=body.get("address", ""),
            nickname=body.get("nickname", ""),
        )
        try:
            service.create(user)
        except ServiceError as exc:
            return _error(exc, 500)
        logger.info("user created: %r", user)
        return jsonify(user.to_dict()), 201

    @app.get("/users/<user_id>")
    def read_user(user_id: str):
        try:
            user = service.get(user_id)
        except NotFoundError as exc:
            logger.warning("user not found: id=%s", user_id)
            return _error(exc, 404)
        except ServiceError as exc:
            logger.error("error trying to get user: %s", exc)
            return _error(exc, 500)
        logger.info("get user succeed: %r", user)
        return jsonify(user.to_dict()), 200

    @app.patch("/users/<user_id>")
    def update_user(user_id: str):
        body = _bind_json({"name": (str,), "address": (str,), "nickname": (str,)})
        updates = UserUpdate(
            name=body.get("name"),
            address=body.get("address"),
            nickname=body.get("nickname"),
        )
        try:
            user = service.update(user_id, updates)
        except NotFoundError as exc:
            return _error(exc, 404)
        except ServiceError as exc:
            return _error(exc, 500)
        return jsonify(user.to_dict()), 200

    @app.delete("/users/<user_id>")
    def delete_user(user_id: str):
        try:
            service.delete(user_id)
        except NotFoundError as exc:
            return _error(exc, 404)
        except ServiceError as exc:
            return _error(exc, 500)
        return "", 204

    return app


def create_sales_app(
    sale_service: SaleService | None = None,
    user_service: UserService | None = None,
) -> Flask:
    """Build the application serving sale endpoints."""
    if sale_service is None:
        users = user_service if user_service is not None else UserService()
        sale_service = SaleService(users)
    users = user_service if user_service is not None else sale_service.user_service
    sales = sale_service

    app = Flask("usersales.sales")
    _register_common(app)

    @app.post("/sales")
    def create_sale():
        body = _bind_json({"user_id": (str,), "amount": (int, float)})
        user_id = body.get("user_id", "")
        try:
            users.get(user_id)
        except NotFoundError as exc:
            return _error(exc, 400)

        sale = Sale(user_id=user_id, amount=float(body.get("amount", 0.0)))
        try:
            sales.create(sale)
        except ServiceError as exc:
            return _error(exc, 500)
        logger.info("sale created: %r", sale)
        return jsonify(sale.to_dict()), 201

    @app.get("/sales")
    def read_sales():
        user_id = request.args.get("user_id", "")
        status = request.args.get("status", "")
        try:
            report = sales.report(user_id, status)
        except InvalidInputError as exc:
            return _error(exc, 400)
        except ServiceError as exc:
            logger.error("error trying to get sale: %s", exc)
            return _error(exc, 500)
        logger.info("get sales succeed: %r", report)
        return jsonify(report.to_dict()), 200

    @app.patch("/sales/<sale_id>")
    def update_sale(sale_id: str):
        body = _bind_json({"status": (str,)})
        try:
            sale = sales.update(sale_id, SaleUpdate(status=body.get("status", "")))
        except SaleNotFoundError as exc:
            return _error(exc, 404)
        except InvalidInputError as exc:
            return _error(exc, 400)
        except TransactionInvalidError as exc:
            return _error(exc, 409)
        except ServiceError as exc:
            return _error(exc, 500)
        return jsonify(sale.to_dict()), 200

    return app


def main(argv: Sequence[str] | None = None) -> int:
    """Run the users application server."""
    parser = argparse.ArgumentParser(description="Serve the users API.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to bind")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    app = create_users_app(UserService())
    try:
        app.run(host=args.host, port=args.port)
    except OSError as exc:
        raise RuntimeError(f"error trying to start server: {exc}") from exc
    return 0