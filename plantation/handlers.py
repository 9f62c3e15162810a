"""HTTP-independent request handlers of the plantation service."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from .config import Config
from .drone import calculate_drone_distance as _plan_route
from .models import DronePlan, Estate, Tree
from .repository import Repository
from .validation import ValidationError, validate_estate_request, validate_tree_request

logger = logging.getLogger(__name__)

INVALID_REQUEST = "Invalid request"
INTERNAL_ERROR = "Something happens in our end. Let us check."
ESTATE_NOT_FOUND = "Estate not found"


@dataclass(frozen=True)
class Response:
    """Status code and JSON body produced by a handler."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)


def _error(status: HTTPStatus, message: str) -> Response:
    return Response(int(status), {"error": message})


def _ok(body: dict[str, Any]) -> Response:
    return Response(int(HTTPStatus.OK), body)


class Server:
    """Implements the estate, tree, stats and drone-plan endpoints."""

    def __init__(self, repository: Repository, config: Config) -> None:
        self.repository = repository
        self.config = config

    def post_estate(self, body: Any) -> Response:
        """Create an estate from a JSON body holding length and width."""
        try:
            request = validate_estate_request(body)
        except ValidationError as exc:
            logger.info("err validating request: %s", exc)
            return _error(HTTPStatus.BAD_REQUEST, INVALID_REQUEST)

        try:
            created = self.repository.create_estate(
                str(uuid.uuid4()), request.length, request.width
            )
        except Exception:
            logger.exception("err when creating estate")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

        try:
            estate_id = uuid.UUID(str(created))
        except ValueError:
            logger.error("err when parsing estate UUID: %r", created)
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        return _ok({"id": str(estate_id)})

    def post_tree(self, estate_id: uuid.UUID | str, body: Any) -> Response:
        """Plant a tree in an estate after checking bounds and occupancy."""
        try:
            request = validate_tree_request(body)
        except ValidationError as exc:
            logger.info("err validating request: %s", exc)
            return _error(HTTPStatus.BAD_REQUEST, INVALID_REQUEST)

        key = str(estate_id)
        try:
            estate = self.repository.get_estate(key)
        except Exception:
            logger.exception("err getting estate by estate id")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        if estate is None:
            return _error(HTTPStatus.NOT_FOUND, ESTATE_NOT_FOUND)

        outside_x = request.x > estate.length or request.x < 0
        outside_y = request.y > estate.width or request.y < 0
        if outside_x or outside_y:
            return _error(HTTPStatus.BAD_REQUEST, INVALID_REQUEST)

        try:
            occupied = self.repository.tree_exists(key, request.x, request.y)
        except Exception:
            logger.exception("err checking whether tree exists")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        if occupied:
            return _error(HTTPStatus.BAD_REQUEST, INVALID_REQUEST)

        try:
            created = self.repository.create_tree(
                str(uuid.uuid4()), key, request.x, request.y, request.height
            )
        except Exception:
            logger.exception("err creating tree")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

        try:
            tree_id = uuid.UUID(str(created))
        except ValueError:
            logger.error("err when parsing tree UUID: %r", created)
            return _error(HTTPStatus.BAD_REQUEST, INVALID_REQUEST)
        return _ok({"id": str(tree_id)})

    def get_stats(self, estate_id: uuid.UUID | str) -> Response:
        """Return count, max, min and median tree height of an estate."""
        key = str(estate_id)
        try:
            estate = self.repository.get_estate(key)
        except Exception:
            logger.exception("err getting estate by estate id")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        if estate is None:
            return _error(HTTPStatus.NOT_FOUND, ESTATE_NOT_FOUND)

        try:
            stats = self.repository.get_estate_stats(key)
        except Exception:
            logger.exception("err getting estate stats by estate id")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
        return _ok(stats.to_dict())

    def get_drone_plan(
        self, estate_id: uuid.UUID | str, max_distance: int | None = None
    ) -> Response:
        """Return the patrol distance, or how far the drone gets within *max_distance*."""
        try:
            estate_trees = self.repository.get_estate_trees(str(estate_id))
        except LookupError:
            return _error(HTTPStatus.NOT_FOUND, ESTATE_NOT_FOUND)
        except Exception:
            logger.exception("err getting estate trees by estate id")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INVALID_REQUEST)
        if estate_trees is None:
            return _error(HTTPStatus.NOT_FOUND, ESTATE_NOT_FOUND)

        try:
            plan = self.calculate_drone_distance(
                estate_trees.estate, estate_trees.trees, max_distance
            )
        except ValueError:
            logger.exception("err calculating drone distance")
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

        if max_distance is None:
            return _ok({"distance": plan.total_distance})
        return _ok(
            {
                "distance": max_distance,
                "rest": {"x": plan.last_x, "y": plan.last_y},
            }
        )

    def calculate_drone_distance(
        self,
        estate: Estate | None,
        trees: Iterable[Tree],
        max_distance: int | None = None,
    ) -> DronePlan:
        """Plan the patrol using the configured scale factor."""
        return _plan_route(estate, trees, self.config.scale_factor, max_distance)