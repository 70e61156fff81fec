import os

DEFAULT_REMOTES = "upstream,origin"
DEFAULT_COMMENTS_LIMIT = 100
DEFAULT_SEARCH_LIMIT = 50


def get_gh_binary() -> str:
    return os.getenv("OCTO_GH_BINARY", "gh")


def get_fzf_binary() -> str:
    return os.getenv("OCTO_FZF_BINARY", "fzf")


def get_default_remotes() -> list[str]:
    remotes = os.getenv("OCTO_DEFAULT_REMOTES", DEFAULT_REMOTES)
    return [remote.strip() for remote in remotes.split(",") if remote.strip()]


def get_editor() -> str:
    env_vars: list[str] = ["OCTO_EDITOR", "VISUAL", "EDITOR"]
    for env_var in env_vars:
        if editor := os.getenv(env_var):
            return editor
    return "vi"


def get_comments_limit() -> int:
    return int(os.getenv("OCTO_COMMENTS_LIMIT", str(DEFAULT_COMMENTS_LIMIT)))


def get_search_limit() -> int:
    return int(os.getenv("OCTO_SEARCH_LIMIT", str(DEFAULT_SEARCH_LIMIT)))


def get_log_level() -> str:
    return os.getenv("OCTO_LOG_LEVEL", "WARNING").upper()
