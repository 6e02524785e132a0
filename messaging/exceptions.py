"""Messaging domain exceptions."""


class MessagingError(Exception):
    """Base exception for the messaging domain"""
    pass


class NotAuthenticatedError(MessagingError):
    """A mutation was attempted without an actor"""
    def __init__(self):
        super().__init__("Not authenticated")


class NotParticipantError(MessagingError):
    """The actor is not a participant of the conversation"""
    def __init__(self, conversation_id: str, user_id: str):
        super().__init__(f"User {user_id} is not a participant of conversation {conversation_id}")
        self.conversation_id = conversation_id
        self.user_id = user_id


class EmptyMessageError(MessagingError):
    """Message has neither text content nor media"""
    def __init__(self):
        super().__init__("Message content cannot be empty")


class InvalidParticipantsError(MessagingError):
    """Conversation needs at least one participant besides the creator"""
    pass


class InvalidCursorError(MessagingError):
    """Pagination cursor cannot be decoded"""
    def __init__(self, cursor: str):
        super().__init__(f"Invalid cursor: {cursor}")
        self.cursor = cursor


class ConversationCreateError(MessagingError):
    """Conversation creation failed and was rolled back"""
    pass
