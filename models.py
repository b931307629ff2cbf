# models.py
"""
Database models for the market data service.
Defines table: app_settings (durable key-value store)
"""

from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class AppSetting(db.Model):
    """Durable key-value store (rate budget state lives here)"""
    __tablename__ = 'app_settings'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(50), unique=True, nullable=False)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<AppSetting {self.key}={self.value}>'

    @staticmethod
    def get_value(key, default=None):
        """Get setting value by key"""
        setting = AppSetting.query.filter_by(key=key).first()
        return setting.value if setting else default

    @staticmethod
    def set_value(key, value):
        """Set setting value (create or update)"""
        setting = AppSetting.query.filter_by(key=key).first()
        if setting:
            setting.value = str(value)
            setting.updated_at = datetime.utcnow()
        else:
            setting = AppSetting(key=key, value=str(value))
            db.session.add(setting)
        db.session.commit()
        return setting

    @staticmethod
    def delete_value(key):
        """Remove a setting if present"""
        AppSetting.query.filter_by(key=key).delete()
        db.session.commit()
