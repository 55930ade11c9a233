"""The Swagger 2.0 description of the HTTP API."""

from __future__ import annotations

from typing import Any

_JSON = ["application/json"]


def _error(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "schema": {"type": "object", "additionalProperties": {"type": "string"}},
    }


def _created() -> dict[str, Any]:
    return {"description": "Created", "schema": {"type": "string"}}


def _body(description: str, name: str, definition: str) -> dict[str, Any]:
    return {
        "description": description,
        "name": name,
        "in": "body",
        "required": True,
        "schema": {"$ref": f"#/definitions/{definition}"},
    }


def _paths() -> dict[str, Any]:
    return {
        "/accounts": {
            "post": {
                "description": "Creates a new account with a specified ID and initial balance.",
                "consumes": list(_JSON),
                "produces": list(_JSON),
                "tags": ["accounts"],
                "summary": "Create a new account",
                "parameters": [
                    _body("Account creation request", "account", "handler.CreateAccountRequest")
                ],
                "responses": {
                    "201": _created(),
                    "400": _error("Bad Request"),
                    "500": _error("Internal Server Error"),
                },
            }
        },
        "/accounts/{account_id}": {
            "get": {
                "description": "Retrieves an account's details and current balance by its ID.",
                "consumes": list(_JSON),
                "produces": list(_JSON),
                "tags": ["accounts"],
                "summary": "Get account by ID",
                "parameters": [
                    {
                        "type": "string",
                        "description": "Account ID",
                        "name": "account_id",
                        "in": "path",
                        "required": True,
                    }
                ],
                "responses": {
                    "200": {
                        "description": "OK",
                        "schema": {"$ref": "#/definitions/handler.GetAccountResponse"},
                    },
                    "400": _error("Bad Request"),
                    "404": _error("Not Found"),
                    "500": _error("Internal Server Error"),
                },
            }
        },
        "/transactions": {
            "post": {
                "description": "Processes a transfer of funds between two accounts.",
                "consumes": list(_JSON),
                "produces": list(_JSON),
                "tags": ["transactions"],
                "summary": "Create a new transaction",
                "parameters": [
                    _body(
                        "Transaction creation request",
                        "transaction",
                        "handler.CreateTransactionRequest",
                    )
                ],
                "responses": {
                    "201": _created(),
                    "400": _error("Bad Request"),
                    "500": _error("Internal Server Error"),
                },
            }
        },
    }


def _definitions() -> dict[str, Any]:
    return {
        "handler.CreateAccountRequest": {
            "type": "object",
            "properties": {
                "account_id": {"type": "integer"},
                "initial_balance": {"type": "number"},
            },
        },
        "handler.CreateTransactionRequest": {
            "type": "object",
            "properties": {
                "amount": {"type": "number"},
                "destination_account_id": {"type": "integer"},
                "source_account_id": {"type": "integer"},
            },
        },
        "handler.GetAccountResponse": {
            "type": "object",
            "properties": {
                "account_id": {"type": "integer"},
                "balance": {"type": "number"},
                "updated_at": {"type": "string"},
                "version": {"type": "integer"},
            },
        },
    }


def swagger_spec(host: str = "", base_path: str = "") -> dict[str, Any]:
    """Return a fresh Swagger 2.0 document for the API served at ``host``/``base_path``."""
    return {
        "schemes": [],
        "swagger": "2.0",
        "info": {"description": "", "title": "", "contact": {}, "version": ""},
        "host": host,
        "basePath": base_path,
        "paths": _paths(),
        "definitions": _definitions(),
    }