"""Defaults shared across docupload services."""

KEY_DIR_MODE = 0o700
KEY_FILE_MODE = 0o600

DEFAULT_DOCS_DIR = "target/doc"
DEFAULT_ENCRYPTED_KEY = "scripts/id_rsa.enc"
DEFAULT_KEY_PATH = "~/.ssh/id_rsa"
DEFAULT_DEPLOY_DIR = "deploy_docs"
DEFAULT_SETTINGS_FILE = "scripts/travis-doc-upload.cfg"
DEFAULT_CONFIG_FILE = ".docupload.yml"

DEFAULT_TARGET_BRANCH = "gh-pages"
DEFAULT_RELEASE_BRANCH = "master"
DEFAULT_PUBLISH_CHANNEL = "stable"
PULL_REQUEST_FALSE_VALUE = "false"
DEFAULT_REMOTE_TEMPLATE = "git@github.com:{repo}"

DEFAULT_BOT_NAME = "doc upload bot"
DEFAULT_BOT_EMAIL = "nobody@example.com"

ENV_BRANCH = "TRAVIS_BRANCH"
ENV_PULL_REQUEST = "TRAVIS_PULL_REQUEST"
ENV_CHANNEL = "TRAVIS_RUST_VERSION"
ENV_REPO_SLUG = "TRAVIS_REPO_SLUG"
ENV_PROJECT_NAME = "PROJECT_NAME"
ENV_DOCS_REPO = "DOCS_REPO"
ENV_SECRET_ID = "SSH_KEY_TRAVIS_ID"

SETTINGS_KEYS = (ENV_PROJECT_NAME, ENV_DOCS_REPO, ENV_SECRET_ID)
