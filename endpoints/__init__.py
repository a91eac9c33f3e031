"""Thin wrappers over the Lux backend's REST resources

Every wrapper takes the ApiClient as its first argument and returns the
success envelope, raising ApiClientError on failure.
"""

from .auth import (
    login,
    register,
    logout,
    forgot_password,
    reset_password,
    get_current_user,
    update_profile,
    refresh_tokens,
    verify_email,
    resend_verification_email,
    change_password,
)
from .events import (
    get_events,
    get_event,
    create_event,
    update_event,
    delete_event,
    get_my_events,
    get_attending_events,
    publish_event,
    cancel_event,
    get_event_attendees,
    register_for_event,
    unregister_from_event,
    check_in_attendee,
    get_upcoming_events,
    search_events,
)
from .invitations import (
    get_invitations,
    get_received_invitations,
    get_sent_invitations,
    get_invitation,
    create_invitation,
    send_invitations,
    respond_to_invitation,
    cancel_invitation,
    resend_invitation,
    get_invitation_by_token,
    respond_to_invitation_by_token,
    get_pending_invitation_count,
)
from .posts import (
    get_event_posts,
    get_post,
    create_post,
    update_post,
    delete_post,
    pin_post,
    unpin_post,
)

__all__ = [
    # Auth
    "login",
    "register",
    "logout",
    "forgot_password",
    "reset_password",
    "get_current_user",
    "update_profile",
    "refresh_tokens",
    "verify_email",
    "resend_verification_email",
    "change_password",
    # Events
    "get_events",
    "get_event",
    "create_event",
    "update_event",
    "delete_event",
    "get_my_events",
    "get_attending_events",
    "publish_event",
    "cancel_event",
    "get_event_attendees",
    "register_for_event",
    "unregister_from_event",
    "check_in_attendee",
    "get_upcoming_events",
    "search_events",
    # Invitations
    "get_invitations",
    "get_received_invitations",
    "get_sent_invitations",
    "get_invitation",
    "create_invitation",
    "send_invitations",
    "respond_to_invitation",
    "cancel_invitation",
    "resend_invitation",
    "get_invitation_by_token",
    "respond_to_invitation_by_token",
    "get_pending_invitation_count",
    # Posts
    "get_event_posts",
    "get_post",
    "create_post",
    "update_post",
    "delete_post",
    "pin_post",
    "unpin_post",
]
