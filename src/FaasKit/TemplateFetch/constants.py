# === NAVMAP v1 ===
# {
#   "module": "FaasKit.TemplateFetch.constants",
#   "purpose": "Well-known names, URLs, and limits shared by the template fetcher.",
#   "sections": []
# }
# === /NAVMAP ===

"""Well-known names, URLs, and limits shared by the template fetcher."""

#: Repository consulted when callers do not supply a template URL
DEFAULT_TEMPLATE_REPOSITORY = "https://github.com/openfaas/faas-cli"

#: Local staging file for the downloaded archive (relative to the working directory)
ARCHIVE_NAME = "master.zip"

#: Path appended to the repository URL to obtain the branch archive
ARCHIVE_URL_SUFFIX = "/archive/master.zip"

#: Directory inside the archive (and on disk) holding one subdirectory per language
TEMPLATE_DIRECTORY = "template"

#: ``template/<language>/`` splits into exactly three segments on ``/``
ROOT_LANGUAGE_DIR_SPLIT_COUNT = 3

#: Request timeout applied to the archive download (seconds)
DEFAULT_FETCH_TIMEOUT_SEC = 120.0

#: Permission bits applied to the downloaded archive (owner read/write/execute)
ARCHIVE_FILE_MODE = 0o700

#: Fallback modes for zip entries that carry no Unix permission bits
DEFAULT_DIR_MODE = 0o777
DEFAULT_FILE_MODE = 0o666

#: Block size used when streaming entry content to disk
COPY_CHUNK_SIZE = 64 * 1024

__all__ = [
    "DEFAULT_TEMPLATE_REPOSITORY",
    "ARCHIVE_NAME",
    "ARCHIVE_URL_SUFFIX",
    "TEMPLATE_DIRECTORY",
    "ROOT_LANGUAGE_DIR_SPLIT_COUNT",
    "DEFAULT_FETCH_TIMEOUT_SEC",
    "ARCHIVE_FILE_MODE",
    "DEFAULT_DIR_MODE",
    "DEFAULT_FILE_MODE",
    "COPY_CHUNK_SIZE",
]
