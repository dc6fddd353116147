from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class ModuleModel(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    icon = Column(String, nullable=False, default="Box")

    forms = relationship("FormModel", cascade="all, delete-orphan", order_by="FormModel.id")
    templates = relationship(
        "DocumentTemplateModel", cascade="all, delete-orphan", order_by="DocumentTemplateModel.id"
    )


class FormModel(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(Integer, ForeignKey("modules.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text)
    fields_json = Column(Text, nullable=False, default="[]")

    records = relationship("RecordModel", cascade="all, delete-orphan", order_by="RecordModel.id")


class RecordModel(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(Integer, ForeignKey("forms.id"), index=True, nullable=False)
    data_json = Column(Text, nullable=False, default="{}")


class DocumentTemplateModel(Base):
    __tablename__ = "document_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(Integer, ForeignKey("modules.id"), index=True, nullable=False)
    form_id = Column(Integer, nullable=True)
    name = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    styles = Column(Text, nullable=False, default="")
