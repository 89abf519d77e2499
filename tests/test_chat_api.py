import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from portal.db import Base, get_db
from portal.models import ChatMessage
from portal.realtime.context import build_realtime_context
from portal.routers import chat, realtime, site
from portal.services.chat_service import save_chat_message


STUDENT = 's@psgtech.ac.in'
TEACHER = 't@psgtech.ac.in'


class _StepClock:
    def __init__(self, start: datetime):
        self._current = start

    def now(self) -> datetime:
        value = self._current
        self._current = value + timedelta(seconds=1)
        return value


class ChatApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(cls._tmpdir.name) / 'test_chat_api.db'
        cls._engine = create_engine(f"sqlite:///{db_path}", connect_args={'check_same_thread': False})
        cls._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=cls._engine)
        Base.metadata.create_all(bind=cls._engine)

        app = FastAPI()
        app.include_router(chat.router)
        app.include_router(realtime.router)
        app.include_router(site.router)
        app.state.realtime = build_realtime_context(cls._session_factory)

        def override_get_db():
            db = cls._session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        cls.app = app
        cls.client = TestClient(app).__enter__()

    @classmethod
    def tearDownClass(cls):
        cls.client.__exit__(None, None, None)
        cls._engine.dispose()
        cls._tmpdir.cleanup()

    def setUp(self):
        db = self._session_factory()
        try:
            db.query(ChatMessage).delete()
            db.commit()
        finally:
            db.close()

    def test_history_ascending_in_either_orientation(self):
        clock = _StepClock(datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc))
        db = self._session_factory()
        try:
            save_chat_message(db, student_email=STUDENT, teacher_email=TEACHER, sender=STUDENT, message='hello', time_provider=clock)
            save_chat_message(db, student_email=TEACHER, teacher_email=STUDENT, sender=TEACHER, message='hi', time_provider=clock)
            save_chat_message(db, student_email='x@psgtech.ac.in', teacher_email=TEACHER, sender='x', message='other pair', time_provider=clock)
            db.add(
                ChatMessage(
                    student_email=STUDENT,
                    teacher_email=TEACHER,
                    sender=STUDENT,
                    message='earliest',
                    timestamp=datetime(2026, 9, 30, 9, 0, tzinfo=timezone.utc),
                )
            )
            db.commit()
        finally:
            db.close()

        response = self.client.get('/chat-messages', params={'studentEmail': STUDENT, 'teacherEmail': TEACHER})
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual([row['message'] for row in payload], ['earliest', 'hello', 'hi'])
        self.assertEqual(set(payload[0].keys()), {'sender', 'message', 'timestamp'})

    def test_missing_query_params(self):
        response = self.client.get('/chat-messages', params={'studentEmail': STUDENT})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing studentEmail or teacherEmail'})

    def test_chat_relayed_to_other_member_and_persisted(self):
        room = f'{STUDENT}-{TEACHER}'
        first = {'room': room, 'studentEmail': STUDENT, 'teacherEmail': TEACHER, 'sender': TEACHER, 'message': 'Welcome'}
        second = {'room': room, 'studentEmail': STUDENT, 'teacherEmail': TEACHER, 'sender': TEACHER, 'message': 'See you'}

        with self.client.websocket_connect('/ws') as student_ws, self.client.websocket_connect('/ws') as teacher_ws:
            student_ws.send_json({'event': 'joinRoom', 'data': room})
            student_ws.send_json({'event': 'ping', 'data': 1})
            self.assertEqual(student_ws.receive_json(), {'event': 'pong', 'data': 1})

            teacher_ws.send_json({'event': 'joinRoom', 'data': room})
            teacher_ws.send_json({'event': 'chat message', 'data': first})
            teacher_ws.send_json({'event': 'chat message', 'data': second})
            teacher_ws.send_json({'event': 'ping', 'data': 2})
            # The sender gets no echo of its own messages.
            self.assertEqual(teacher_ws.receive_json(), {'event': 'pong', 'data': 2})

            self.assertEqual(student_ws.receive_json(), {'event': 'chat message', 'data': first})
            self.assertEqual(student_ws.receive_json(), {'event': 'chat message', 'data': second})

        response = self.client.get('/chat-messages', params={'studentEmail': STUDENT, 'teacherEmail': TEACHER})
        self.assertEqual([row['message'] for row in response.json()], ['Welcome', 'See you'])

    def test_bad_frames_are_ignored(self):
        with self.client.websocket_connect('/ws') as ws:
            ws.send_text('not json')
            ws.send_json(['no', 'event'])
            ws.send_json({'event': 'unknown', 'data': {}})
            ws.send_json({'event': 'identify', 'data': {'email': STUDENT}})
            ws.send_json({'event': 'chat message', 'data': 'just text'})
            ws.send_json({'event': 'ping', 'data': 'alive'})
            self.assertEqual(ws.receive_json(), {'event': 'pong', 'data': 'alive'})
            self.assertNotIn(STUDENT, self.app.state.realtime.registry.keys())

    def test_unpersistable_chat_still_broadcast(self):
        room = 'room-without-emails'
        payload = {'room': room, 'sender': STUDENT, 'message': 'no pair given'}
        with self.client.websocket_connect('/ws') as listener, self.client.websocket_connect('/ws') as sender:
            listener.send_json({'event': 'joinRoom', 'data': room})
            listener.send_json({'event': 'ping', 'data': 0})
            self.assertEqual(listener.receive_json(), {'event': 'pong', 'data': 0})

            sender.send_json({'event': 'chat message', 'data': payload})
            sender.send_json({'event': 'ping', 'data': 0})
            self.assertEqual(sender.receive_json(), {'event': 'pong', 'data': 0})
            self.assertEqual(listener.receive_json(), {'event': 'chat message', 'data': payload})

        db = self._session_factory()
        try:
            self.assertEqual(db.query(ChatMessage).count(), 0)
        finally:
            db.close()

    def test_health_counts_identified_connections(self):
        before = self.client.get('/health').json()
        self.assertEqual(before['status'], 'ok')
        with self.client.websocket_connect('/ws') as ws:
            ws.send_json({'event': 'identify', 'data': {'email': STUDENT, 'role': 'student'}})
            ws.send_json({'event': 'ping', 'data': None})
            ws.receive_json()
            after = self.client.get('/health').json()
            self.assertEqual(after['realtime_connections'], before['realtime_connections'] + 1)

    def test_binary_frame_is_ignored(self):
        with self.client.websocket_connect('/ws') as ws:
            ws.send_bytes(b'\x00\x01')
            ws.send_json({'event': 'ping', 'data': 1})
            self.assertEqual(ws.receive_json(), {'event': 'pong', 'data': 1})

    def test_history_timestamps_are_utc_instants(self):
        local_now = datetime(2026, 10, 19, 12, 49, 8, tzinfo=ZoneInfo('Asia/Kolkata'))
        clock = _StepClock(local_now)
        db = self._session_factory()
        try:
            save_chat_message(db, student_email=STUDENT, teacher_email=TEACHER, sender=STUDENT, message='hello', time_provider=clock)
        finally:
            db.close()

        response = self.client.get('/chat-messages', params={'studentEmail': STUDENT, 'teacherEmail': TEACHER})
        self.assertEqual(response.status_code, 200)
        stamp = response.json()[0]['timestamp']
        self.assertEqual(stamp, '2026-10-19T07:19:08+00:00')
        self.assertEqual(datetime.fromisoformat(stamp), local_now)
