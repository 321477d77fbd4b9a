import pytest

from rehab_client.coaching import CoachingScheduler

from helpers import FakeCollaborator


@pytest.fixture
def collaborator():
    return FakeCollaborator()


@pytest.fixture
def messages():
    return []


@pytest.fixture
def scheduler(collaborator, messages):
    return CoachingScheduler(collaborator, messages.append)
