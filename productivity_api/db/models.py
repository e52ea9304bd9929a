from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata

# Ссылки между таблицами хранятся как обычные целые поля без внешних ключей:
# хранилище не проверяет ссылочную целостность ни в одном из бэкендов.


class Project(Base):
    """Проект"""
    __tablename__ = 'projects'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    color = Column(String(32))


class Task(Base):
    """Задача"""
    __tablename__ = 'tasks'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    project_id = Column(Integer, index=True)
    status = Column(String(20), nullable=False, index=True)  # todo, in_progress, completed
    priority = Column(String(20), nullable=False, index=True)  # low, medium, high, urgent
    due_date = Column(DateTime(timezone=True))
    completed = Column(Boolean, nullable=False, default=False)
    progress = Column(Integer, nullable=False, default=0)
    time_estimate = Column(Integer)  # в минутах
    tags = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)


class PomodoroSession(Base):
    """Сессия помидора"""
    __tablename__ = 'pomodoro_sessions'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True))
    duration = Column(Integer, nullable=False)  # в минутах
    completed = Column(Boolean, nullable=False, default=False)


class Goal(Base):
    """SMART-цель"""
    __tablename__ = 'goals'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    specific = Column(Text)
    measurable = Column(Text)
    achievable = Column(Text)
    relevant = Column(Text)
    time_bound = Column(Text)
    due_date = Column(DateTime(timezone=True))
    completed = Column(Boolean, nullable=False, default=False)
    progress = Column(Integer, nullable=False, default=0)


class TimeBlock(Base):
    """Блок времени в календаре"""
    __tablename__ = 'time_blocks'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    task_id = Column(Integer, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    color = Column(String(32))


class User(Base):
    """Модель пользователя"""
    __tablename__ = 'users'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    username = Column(String(100), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    avatar = Column(Text)
    role = Column(String(50), nullable=False, default='user')
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_login = Column(DateTime(timezone=True))
    firebase_uid = Column(String(128))


class Team(Base):
    """Команда"""
    __tablename__ = 'teams'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    avatar = Column(Text)
    created_by_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class TeamMember(Base):
    """Участие пользователя в команде"""
    __tablename__ = 'team_members'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    role = Column(String(20), nullable=False, default='member')  # owner, admin, member, guest
    joined_at = Column(DateTime(timezone=True), nullable=False)


class CollaborativeProject(Base):
    """Проект, открытый команде"""
    __tablename__ = 'collaborative_projects'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, nullable=False, index=True)
    team_id = Column(Integer, nullable=False, index=True)
    shared_by_id = Column(Integer, nullable=False)
    shared_at = Column(DateTime(timezone=True), nullable=False)
    permissions = Column(String(20), nullable=False, default='edit')


class TaskAssignment(Base):
    """Назначение задачи пользователю"""
    __tablename__ = 'task_assignments'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    assigned_by_id = Column(Integer, nullable=False)
    assigned_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default='pending')  # pending, accepted, declined, completed


class ActivityLog(Base):
    """Запись журнала активности"""
    __tablename__ = 'activity_logs'
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    team_id = Column(Integer, index=True)
    project_id = Column(Integer, index=True)
    task_id = Column(Integer, index=True)
    action = Column(String(100), nullable=False)
    details = Column(JSON)
    created_at = Column(DateTime(timezone=True), nullable=False)


TABLES = {
    'tasks': Task,
    'projects': Project,
    'pomodoro_sessions': PomodoroSession,
    'goals': Goal,
    'time_blocks': TimeBlock,
    'users': User,
    'teams': Team,
    'team_members': TeamMember,
    'collaborative_projects': CollaborativeProject,
    'task_assignments': TaskAssignment,
    'activity_logs': ActivityLog,
}
