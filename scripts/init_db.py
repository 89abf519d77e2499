from datetime import date, timedelta
from pathlib import Path
import sys


# Ensure imports work when running this file directly: `python scripts/init_db.py`.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from portal.core.time_provider import default_time_provider
from portal.db import Base, SessionLocal, engine
from portal.models import AssociationMember, Book, Event, TeacherInfo, User, UserType


Base.metadata.create_all(bind=engine)

db = SessionLocal()
try:
    if not db.query(Event).first():
        today = default_time_provider.today()
        db.add_all(
            [
                Event(
                    title='Orientation Day',
                    event_date=today + timedelta(days=3),
                    description='Welcome session for first-year students.',
                    registration_link='https://forms.example.org/orientation',
                ),
                Event(
                    title='Hackathon',
                    event_date=today + timedelta(days=14),
                    description='24-hour inter-department hackathon.',
                    registration_link='https://forms.example.org/hackathon',
                ),
            ]
        )
        db.commit()

    if not db.query(User).filter(User.user_type == UserType.TEACHER.value).first():
        teacher = User(email='faculty1@psgtech.ac.in', password='faculty1', user_type=UserType.TEACHER.value)
        db.add(teacher)
        db.commit()
        db.refresh(teacher)
        db.add(
            TeacherInfo(
                user_id=teacher.id,
                qualification='PhD, Computer Science',
                class_handling='Data Structures (II year)',
                achievements='Best Teacher Award 2023',
                picture='images/faculty1.jpg',
            )
        )
        db.commit()

    if not db.query(Book).first():
        db.add_all(
            [
                Book(title='Introduction to Algorithms', author='Cormen et al.', available_copies=3),
                Book(title='Operating System Concepts', author='Silberschatz et al.', available_copies=2),
                Book(title='Computer Networks', author='Tanenbaum', available_copies=1),
            ]
        )
        db.commit()

    if not db.query(AssociationMember).first():
        db.add_all(
            [
                AssociationMember(name='Anitha R', position='Secretary', department='CSE', email='anitha@psgtech.ac.in'),
                AssociationMember(name='Karthik S', position='Treasurer', department='ECE', email='karthik@psgtech.ac.in'),
            ]
        )
        db.commit()
finally:
    db.close()

print('DB initialized with sample data.')
