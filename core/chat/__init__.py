from core.chat.gate import ChatGate, can_open_chat

__all__ = ['ChatGate', 'can_open_chat']
