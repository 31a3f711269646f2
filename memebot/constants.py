"""Constants and configuration values for the memestorage bot."""

# Backend
DEFAULT_BACKEND_URL = "https://www.memestorage.tk"
DEFAULT_BACKEND_TIMEOUT = 10.0  # seconds

PATH_PERSONAL_SEARCH = "/oauth/telegram/user/search"
# The inline flow of the old bot used /oauth/telegram/storage/search/description
# for the same search; this is the one canonical path.
PATH_PUBLIC_SEARCH = "/api/storage/search/description"
PATH_USER_CHECK = "/oauth/telegram/user"
PATH_ADD_MEME = "/oauth/telegram/user/add"

# Telegram
TELEGRAM_FILE_URL = "https://api.telegram.org/file/bot{token}/{path}"
TELEGRAM_MESSAGE_LIMIT = 4096
INLINE_RESULTS_LIMIT = 50

# Token prefixes
COMMAND_PREFIX = "/"
TAG_PREFIX = "#"

# Commands
COMMAND_ADD = "add"
COMMAND_SEARCH = "search"
COMMAND_REGISTER = "register"
COMMAND_LOGIN = "login"
COMMAND_START = "start"

# Media kinds accepted in a media group
MEDIA_PHOTO = "photo"
MEDIA_VIDEO = "video"

# User-facing copy
TEXT_UPLOADED = "Your meme was successfully uploaded. memestorage.tk/storage"
TEXT_UPLOAD_FAILED = "Oops, something went wrong. We'll fix it."
TEXT_NOT_CONNECTED = "You haven't connected telegram with your memestorage account yet."
TEXT_SEND_PHOTO = "Send me photo with your specific description and #tags."
TEXT_SEARCHING = "searching..."
TEXT_NO_MEMES = "No memes found on your request."
TEXT_TYPE_DESCRIPTION = "Type description after /search command."
TEXT_REGISTER = "Go to www.memestorage.tk/register."
TEXT_LOGIN = "Go to www.memestorage.tk/auth and set your telegram id ({chat_id}) in settings."
