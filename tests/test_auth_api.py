import tempfile
import unittest
from pathlib import Path

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from portal.core.errors import register_error_handlers
from portal.db import Base, get_db
from portal.models import User
from portal.routers import auth
from portal.services.auth_service import is_valid_domain


class AuthApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(cls._tmpdir.name) / 'test_auth_api.db'
        cls._engine = create_engine(f"sqlite:///{db_path}", connect_args={'check_same_thread': False})
        cls._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=cls._engine)
        Base.metadata.create_all(bind=cls._engine)

        app = FastAPI()
        register_error_handlers(app)
        app.include_router(auth.router)

        def override_get_db():
            db = cls._session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls):
        cls.client.close()
        cls._engine.dispose()
        cls._tmpdir.cleanup()

    def setUp(self):
        db = self._session_factory()
        try:
            db.query(User).delete()
            db.commit()
        finally:
            db.close()

    def _signup(self, email='a@psgtech.ac.in', password='pw1', user_type='student'):
        return self.client.post('/signup', json={'email': email, 'password': password, 'userType': user_type})

    def test_signup_then_login_scenario(self):
        signup = self._signup()
        self.assertEqual(signup.status_code, 200)
        self.assertEqual(signup.json(), {'message': 'Signup successful'})

        wrong = self.client.post('/login', json={'email': 'a@psgtech.ac.in', 'password': 'wrong', 'userType': 'student'})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.json(), {'error': 'Invalid credentials'})

        ok = self.client.post('/login', json={'email': 'a@psgtech.ac.in', 'password': 'pw1', 'userType': 'student'})
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json(), {'message': 'Login successful'})

    def test_signup_twice_rejects_second(self):
        self.assertEqual(self._signup().status_code, 200)
        again = self._signup(password='other')
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json(), {'error': 'User already exists'})

    def test_foreign_domain_rejected_on_signup_and_login(self):
        for email in ('a@gmail.com', 'a@psgtech.ac.in.evil.com', 'no-at-sign'):
            signup = self._signup(email=email)
            self.assertEqual(signup.status_code, 400)
            self.assertEqual(signup.json(), {'error': 'Invalid email domain'})

        login = self.client.post('/login', json={'email': 'x@gmail.com', 'password': 'pw', 'userType': 'student'})
        self.assertEqual(login.status_code, 400)
        self.assertEqual(login.json(), {'error': 'Invalid email domain'})

        db = self._session_factory()
        try:
            self.assertEqual(db.query(User).count(), 0)
        finally:
            db.close()

    def test_missing_fields(self):
        response = self.client.post('/signup', json={'email': 'a@psgtech.ac.in', 'password': 'pw1'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing required fields'})

        response = self.client.post('/login', json={'email': 'a@psgtech.ac.in', 'userType': 'student'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing required fields'})

    def test_login_requires_matching_user_type(self):
        self._signup(user_type='teacher')
        response = self.client.post('/login', json={'email': 'a@psgtech.ac.in', 'password': 'pw1', 'userType': 'student'})
        self.assertEqual(response.status_code, 401)

    def test_password_stored_as_submitted(self):
        self._signup(password='Plain Text 1')
        db = self._session_factory()
        try:
            user = db.query(User).filter(User.email == 'a@psgtech.ac.in').first()
            self.assertEqual(user.password, 'Plain Text 1')
            self.assertEqual(user.user_type, 'student')
        finally:
            db.close()

    def test_non_json_body_reports_invalid_payload(self):
        response = self.client.post('/signup', content='not json', headers={'content-type': 'application/json'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Invalid request payload'})


class DomainGateTests(unittest.TestCase):
    def test_is_valid_domain(self):
        self.assertTrue(is_valid_domain('x@psgtech.ac.in'))
        self.assertFalse(is_valid_domain('x@psgtech.ac.in.org'))
        self.assertFalse(is_valid_domain('x@gmail.com'))
        self.assertFalse(is_valid_domain(''))
        self.assertTrue(is_valid_domain('x@example.edu', domain='example.edu'))
