"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call the editor service for lifecycle logic
- Map domain errors to HTTP responses
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from event_editor.domain.errors import DomainError, ErrorCode
from event_editor.handlers.serializers import EditorStateSerializer, SaveRequestSerializer
from event_editor.services import (
    EditorIdentity,
    EditorMode,
    EventEditor,
    RecordingNavigator,
    RecordingNotifier,
    open_editor,
)
from event_editor.stores import get_event_store

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MISSING_REQUIRED_FIELDS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PRICE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PERSISTENCE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def identity_for(request: Request) -> EditorIdentity:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return EditorIdentity()
    return EditorIdentity(
        user_id=str(user.pk),
        display_name=user.get_full_name() or user.get_username(),
    )


def error_response(error: DomainError, messages: list | None = None) -> Response:
    body = {"code": error.code.value, "message": error.message}
    missing = getattr(error, "missing_fields", None)
    if missing is not None:
        body["missingFields"] = missing
    invalid = getattr(error, "invalid_prices", None)
    if invalid is not None:
        body["invalidPrices"] = invalid
    if messages:
        body["messages"] = messages
    return Response(body, status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST))


class EditorView(APIView):
    """Shared session wiring for editor endpoints."""

    def setup_session(self, request: Request) -> None:
        self.notifier = RecordingNotifier()
        self.navigator = RecordingNavigator()
        self.collaborators = {
            "identity": identity_for(request),
            "notifier": self.notifier,
            "navigator": self.navigator,
        }

    def state_response(self, editor: EventEditor, status_code: int = status.HTTP_200_OK) -> Response:
        body = dict(EditorStateSerializer(editor).data)
        body["messages"] = self.notifier.messages
        body["redirect"] = self.navigator.redirect
        return Response(body, status=status_code)


class EditorCreateView(EditorView):
    """Handler for POST /api/editor/events"""

    def post(self, request: Request) -> Response:
        self.setup_session(request)
        payload = SaveRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        editor = EventEditor(get_event_store(), mode=EditorMode.CREATE, **self.collaborators)
        try:
            editor.save(payload.validated_data["updates"])
        except DomainError as error:
            return error_response(error, self.notifier.messages)
        return self.state_response(editor, status.HTTP_201_CREATED)


class EditorDetailView(EditorView):
    """Handler for GET /api/editor/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        self.setup_session(request)
        try:
            editor = open_editor(get_event_store(), event_id, **self.collaborators)
        except DomainError as error:
            return error_response(error)
        return self.state_response(editor)


class EditorActionView(EditorView):
    """Handler for POST /api/editor/events/{event_id}/{action}"""

    ACTIONS = ("save", "publish", "unpublish", "cancel", "delete", "discard")

    def post(self, request: Request, event_id: str, action: str) -> Response:
        if action not in self.ACTIONS:
            return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        self.setup_session(request)
        try:
            editor = open_editor(get_event_store(), event_id, **self.collaborators)
            if action == "save":
                payload = SaveRequestSerializer(data=request.data)
                payload.is_valid(raise_exception=True)
                editor.save(payload.validated_data["updates"])
            else:
                getattr(editor, action)()
        except DomainError as error:
            return error_response(error, self.notifier.messages)
        logger.info("Editor action handled", extra={"event_id": event_id, "action": action})
        return self.state_response(editor)
