from productivity_api.blueprints.activity import bp as activity_bp
from productivity_api.blueprints.analytics import bp as analytics_bp
from productivity_api.blueprints.auth import bp as auth_bp
from productivity_api.blueprints.health import bp as health_bp
from productivity_api.blueprints.planner import bp as planner_bp
from productivity_api.blueprints.teams import bp as teams_bp

__all__ = ["activity_bp", "analytics_bp", "auth_bp", "health_bp", "planner_bp", "teams_bp"]
