"""GraphQL documents for every operation the CLI sends.

Each document is named (``query Me``, ``mutation Close`` ...) so that logs
and tests can identify the operation without parsing the body.
"""

# Page size for the list-all queries. The client does not paginate past it.
LIST_ALL_PAGE_SIZE = 100

CONVERSATION_FIELDS = """
    id
    number
    subject
    state
    createdAt
    updatedAt
    snoozedUntil
    messagesCount
    assigned {
        ... on Agent {
            id
            email
            name
        }
    }
    contact {
        id
        email
        name
    }
    channel {
        id
        name
    }
    tags {
        id
        name
        color
    }
"""

ME = """
query Me {
    me {
        id
        email
        name
        role
    }
}
"""

CONVERSATIONS = (
    """
query Conversations($first: Int, $after: String, $filter: ConversationFilter) {
    conversations(first: $first, after: $after, filter: $filter) {
        nodes {"""
    + CONVERSATION_FIELDS
    + """        }
        pageInfo {
            hasNextPage
            endCursor
        }
        totalCount
    }
}
"""
)

CONVERSATION = (
    """
query Conversation($number: Int!) {
    conversation(number: $number) {"""
    + CONVERSATION_FIELDS
    + """    }
}
"""
)

MESSAGES = """
query Messages($id: ID!, $first: Int) {
    node(id: $id) {
        ... on Conversation {
            messages(first: $first) {
                nodes {
                    id
                    createdAt
                    bodyText
                    bodyHtml
                    author {
                        __typename
                        ... on Agent {
                            id
                            email
                            name
                        }
                        ... on Contact {
                            id
                            email
                            name
                        }
                    }
                }
            }
        }
    }
}
"""

FOLDERS = f"""
query Folders {{
    folders(first: {LIST_ALL_PAGE_SIZE}) {{
        nodes {{
            id
            name
            count
        }}
    }}
}}
"""

TAGS = f"""
query Tags {{
    tags(first: {LIST_ALL_PAGE_SIZE}) {{
        nodes {{
            id
            name
            color
        }}
    }}
}}
"""

CANNED_REPLIES = f"""
query CannedReplies {{
    cannedReplies(first: {LIST_ALL_PAGE_SIZE}) {{
        nodes {{
            id
            name
            subject
            body
        }}
    }}
}}
"""

AGENTS = f"""
query Agents {{
    agents(first: {LIST_ALL_PAGE_SIZE}) {{
        nodes {{
            id
            email
            name
        }}
    }}
}}
"""


def _mutation(operation: str, field: str, input_type: str) -> str:
    return f"""
mutation {operation}($input: {input_type}!) {{
    {field}(input: $input) {{
        errors {{
            message
        }}
    }}
}}
"""


REPLY = _mutation("Reply", "conversationReply", "ConversationReplyInput")
CLOSE = _mutation("Close", "conversationClose", "ConversationStateInput")
OPEN = _mutation("Open", "conversationOpen", "ConversationStateInput")
SNOOZE = _mutation("Snooze", "conversationSnooze", "ConversationSnoozeInput")
ASSIGN = _mutation("Assign", "conversationAssign", "ConversationAssignInput")
UNASSIGN = _mutation("Unassign", "conversationUnassign", "ConversationUnassignInput")
ADD_NOTE = _mutation("AddNote", "conversationAddNote", "ConversationAddNoteInput")
TAG = _mutation("Tag", "conversationTag", "ConversationTagInput")
UNTAG = _mutation("Untag", "conversationUntag", "ConversationUntagInput")


def operation_name(document: str) -> str:
    """Return the operation name of a document (``"query Me {"`` -> ``"Me"``)."""
    for line in document.splitlines():
        line = line.strip()
        if line.startswith(("query ", "mutation ")):
            name = line.split(" ", 1)[1]
            return name.split("(", 1)[0].split("{", 1)[0].strip()
    return "anonymous"
