import pytest

from cortexchat.chat import ChatSession
from cortexchat.storage import ConversationStore

JAVA_SNIPPET = (
    "public class Foo { public static void main(String[] a) "
    "{ System.out.println(1); } }"
)


@pytest.fixture
def store():
    return ConversationStore()


@pytest.fixture
def session(store):
    return ChatSession(store=store)
