from django.urls import path

from event_editor.handlers import EditorActionView, EditorCreateView, EditorDetailView

urlpatterns = [
    path("events", EditorCreateView.as_view(), name="editor-create"),
    path("events/<str:event_id>", EditorDetailView.as_view(), name="editor-detail"),
    path(
        "events/<str:event_id>/<str:action>",
        EditorActionView.as_view(),
        name="editor-action",
    ),
]
