"""Pure text and result helpers used by the webhook handler."""
from .meme_merge import merge_memes
from .text_tokens import extract_commands, extract_tags, strip_tags

__all__ = ["merge_memes", "extract_commands", "extract_tags", "strip_tags"]
