from dotenv import load_dotenv

from tests.test_fixtures import (  # noqa: F401
    dest_dir,
    make_image,
    nested_source,
    sample_source,
)

# Ensure environment variables from .env are available during test collection
load_dotenv()
