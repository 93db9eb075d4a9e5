"""
Package transaction compiles instructions into legacy messages, signs them
and submits them, reporting the outcome as a SubmitResult.
"""

from .message import (
    PACKET_DATA_SIZE,
    SIGNATURE_LENGTH,
    AccountMeta,
    CompiledInstruction,
    Instruction,
    Message,
    MessageHeader,
    compile_message,
    decode_compact_u16,
    encode_compact_u16,
)
from .transaction import Transaction, sign_message
from .result import SubmitResult, SubmitStatus
from .assembler import TransactionAssembler, submit

__all__ = [
    'PACKET_DATA_SIZE',
    'SIGNATURE_LENGTH',
    'AccountMeta',
    'CompiledInstruction',
    'Instruction',
    'Message',
    'MessageHeader',
    'compile_message',
    'decode_compact_u16',
    'encode_compact_u16',
    'Transaction',
    'sign_message',
    'SubmitResult',
    'SubmitStatus',
    'TransactionAssembler',
    'submit',
]
