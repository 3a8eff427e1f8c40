"""Key/value site settings."""

from . import db, utcnow


HERO_IMAGES_KEY = "hero-images"


class Setting(db.Model):
    """Stores a JSON value under a unique key."""

    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(64), unique=True, nullable=False, index=True)
    value = db.Column(db.JSON, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @classmethod
    def get(cls, key: str):
        return cls.query.filter_by(key=key).first()

    @classmethod
    def upsert(cls, key: str, value) -> "Setting":
        setting = cls.get(key)
        if setting is None:
            setting = cls(key=key, value=value)
            db.session.add(setting)
        else:
            setting.value = value
        return setting
