from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    # Table name defaults to the lower-cased class name ("familymember", "gift", ...)
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
