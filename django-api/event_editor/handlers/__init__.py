from event_editor.handlers.views import EditorActionView, EditorCreateView, EditorDetailView

__all__ = ["EditorActionView", "EditorCreateView", "EditorDetailView"]
