from tests.fixtures.sequences import *  # noqa: F403
