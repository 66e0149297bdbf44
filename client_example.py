"""
Room Chat Relay Client Example for Testing
Console client plus scripted multi-user scenarios
"""

import asyncio
import json
import websockets
import time
from typing import Any, Optional
import argparse
import sys

class ChatClient:
    """WebSocket chat client for manual and scripted testing"""

    def __init__(self, username: str, room: str, server_url: str = "ws://localhost:4000/ws"):
        self.username = username
        self.room = room
        self.server_url = server_url
        self.websocket = None
        self.running = False

    async def connect(self) -> bool:
        """Connect to WebSocket server"""
        try:
            self.websocket = await websockets.connect(self.server_url)
            print(f"✅ Connected to {self.server_url}")
            return True
        except Exception as e:
            print(f"❌ Connection failed: {e}")
            return False

    async def emit(self, event: str, data: Any = None) -> bool:
        """Send one event envelope"""
        if not self.websocket:
            return False

        try:
            await self.websocket.send(json.dumps({"event": event, "data": data if data is not None else {}}))
            return True
        except Exception as e:
            print(f"❌ Send failed: {e}")
            return False

    async def join_room(self) -> bool:
        """Join the configured room and wait for the member snapshot"""
        if not await self.emit("join_room", {"room": self.room, "username": self.username}):
            return False
        print(f"📤 Sent join request: {self.username} -> {self.room}")

        try:
            response = json.loads(await self.websocket.recv())
        except Exception as e:
            print(f"❌ Join failed: {e}")
            return False

        event = response.get("event")
        data = response.get("data")
        if event == "room_users":
            others = ", ".join(u.get("username", "?") for u in data) or "nobody else"
            print(f"✅ Joined {self.room} as {self.username} (online: {others})")
            return True
        if event == "error":
            print(f"❌ Join failed: {data}")
            return False

        print(f"❌ Unexpected response: {response}")
        return False

    async def send_message(self, message: str) -> bool:
        """Send a message to the room"""
        sent = await self.emit("send_message", {"room": self.room, "author": self.username, "message": message})
        if sent:
            print(f"📤 Message sent: {message}")
        return sent

    async def send_typing(self, is_typing: bool) -> bool:
        return await self.emit("typing", {"room": self.room, "username": self.username, "isTyping": is_typing})

    async def leave_room(self) -> bool:
        return await self.emit("leave_room")

    @staticmethod
    def describe_event(event: str, data: Any) -> str:
        """Render one inbound event as a console line"""
        if event == "receive_message":
            stamp = time.strftime('%H:%M:%S', time.localtime(data.get("timestamp", 0) / 1000))
            if data.get("type") == "system":
                return f"📢 [{stamp}] {data.get('message', '')}"
            return f"📨 [{stamp}] {data.get('author', 'unknown')}: {data.get('message', '')}"

        if event in ("room_users", "user_list_update"):
            names = [u.get("username", "?") for u in data]
            return f"👥 Online ({len(names)}): {', '.join(names)}"

        if event == "user_typing":
            verb = "is typing..." if data.get("isTyping") else "stopped typing"
            return f"✏️  {data.get('username', 'someone')} {verb}"

        if event == "error":
            return f"❌ Server error: {data}"

        return f"❓ Unknown event: {event}"

    async def listen_for_messages(self):
        """Listen for incoming events"""
        if not self.websocket:
            return

        while self.running:
            try:
                frame = await asyncio.wait_for(self.websocket.recv(), timeout=1.0)
                envelope = json.loads(frame)
                print(self.describe_event(envelope.get("event"), envelope.get("data")))

            except asyncio.TimeoutError:
                continue
            except websockets.exceptions.ConnectionClosed:
                print("🔌 Connection closed by server")
                break
            except json.JSONDecodeError as e:
                print(f"❌ Bad frame from server: {e}")

    async def disconnect(self):
        """Disconnect from server"""
        self.running = False
        if self.websocket:
            try:
                await self.websocket.close()
                print("🔌 Disconnected from server")
            except websockets.exceptions.WebSocketException as e:
                print(f"❌ Close failed: {e}")

    async def run_interactive(self):
        """Run interactive chat session"""
        if not await self.connect():
            return

        if not await self.join_room():
            await self.disconnect()
            return

        self.running = True
        listen_task = asyncio.create_task(self.listen_for_messages())
        loop = asyncio.get_running_loop()

        try:
            print("\n🎮 Interactive mode started!")
            print("Commands: /leave, /quit, or just type your message")
            print("-" * 50)

            while self.running:
                try:
                    user_input = (await loop.run_in_executor(None, input, f"{self.username}> ")).strip()
                except (KeyboardInterrupt, EOFError):
                    break

                if not user_input:
                    continue

                if user_input == "/quit":
                    break
                elif user_input == "/leave":
                    await self.leave_room()
                    break
                else:
                    await self.send_typing(False)
                    await self.send_message(user_input)

        finally:
            self.running = False
            listen_task.cancel()
            await self.disconnect()

async def _scripted_client(username: str, room: str, server: str, delay: float, messages, linger: float):
    await asyncio.sleep(delay)
    client = ChatClient(username, room, server)
    if await client.connect() and await client.join_room():
        client.running = True
        listen_task = asyncio.create_task(client.listen_for_messages())

        for text in messages:
            await client.send_typing(True)
            await asyncio.sleep(0.5)
            await client.send_message(text)

        await asyncio.sleep(linger)
        listen_task.cancel()
        await client.leave_room()
    await client.disconnect()

async def scenario_shared_room(server: str):
    """Scenario 1: two users chatting in one room"""
    print("\n🧪 Scenario 1: Shared Room")
    print("=" * 60)

    await asyncio.gather(
        _scripted_client("alice", "lobby", server, 0, ["Hello everyone!", "Anyone here?"], 3),
        _scripted_client("bob", "lobby", server, 0.5, ["Hey Alice!"], 2),
    )
    print("✅ Scenario 1 completed")

async def scenario_username_clash(server: str):
    """Scenario 2: the same name differing only by case is rejected"""
    print("\n🧪 Scenario 2: Username Clash")
    print("=" * 60)

    await asyncio.gather(
        _scripted_client("alice", "lobby", server, 0, ["I'm the first Alice!"], 2),
        _scripted_client("ALICE", "lobby", server, 0.5, ["I should never be seen"], 0),
    )
    print("✅ Scenario 2 completed")

async def scenario_rate_limit(server: str):
    """Scenario 3: the eleventh message inside the window is rejected"""
    print("\n🧪 Scenario 3: Rate Limit")
    print("=" * 60)

    client = ChatClient("flooder", "lobby", server)
    if await client.connect() and await client.join_room():
        client.running = True
        listen_task = asyncio.create_task(client.listen_for_messages())
        for i in range(11):
            await client.send_message(f"message {i + 1}")
        await asyncio.sleep(2)
        listen_task.cancel()
    await client.disconnect()
    print("✅ Scenario 3 completed")

SCENARIOS = {
    "1": scenario_shared_room,
    "2": scenario_username_clash,
    "3": scenario_rate_limit,
}

async def main():
    """Main function with command line interface"""
    parser = argparse.ArgumentParser(description="Room Chat Relay Client")
    parser.add_argument("--username", default="testuser", help="Username")
    parser.add_argument("--room", default="general", help="Room id")
    parser.add_argument("--server", default="ws://localhost:4000/ws", help="Server URL")
    parser.add_argument("--test", choices=sorted(SCENARIOS), help="Run test scenario")

    args = parser.parse_args()

    if args.test:
        await SCENARIOS[args.test](args.server)
    else:
        client = ChatClient(args.username, args.room, args.server)
        await client.run_interactive()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Client error: {e}")
        sys.exit(1)
