"""Test doubles and sample patches."""

from langchain_core.messages import AIMessage

FILE_A_PATCH = """@@ -1,3 +1,4 @@
 import os
-x = 1
+y = 1
+z = 2
@@ -10,2 +11,2 @@ def f():
-    return x
+    return y"""

FILE_B_PATCH = """@@ -0,0 +1,2 @@
+def g():
+    return 1"""


class FakeChatModel:
    """Chat model double that replays canned responses in order."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.bound = []

    def bind_tools(self, tools, **kwargs):
        self.bound.append(([getattr(t, "name", None) or t.__name__ for t in tools], kwargs))
        return self

    async def ainvoke(self, messages):
        self.calls.append(list(messages))
        if not self.responses:
            return AIMessage(content="")
        return self.responses.pop(0)


def tool_call_message(name: str, args: dict, call_id: str = "call_1") -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])
