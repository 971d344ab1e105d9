"""Tests for the progress rollup engine."""

import itertools
import threading
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.core.errors import NotFoundError, StoreError, ValidationError
from app.database import Base, build_engine
from app.models import ProgressUpdate, Project
from app.utils.progress import raise_cached_progress, record_progress_update, revise_progress_update


class TestRecordProgressUpdate:
    """Creating an update raises the parent's cache only when it is higher."""

    def test_higher_percent_sets_cache_exactly(self, db_session, make_project):
        project = make_project(progress_percent=30)

        update = record_progress_update(db_session, "project", project.id, 45, "Slab poured")

        assert update.id is not None
        assert update.parent_type == "project"
        assert update.project_id == project.id
        assert update.task_id is None
        assert project.progress_percent == 45

    @pytest.mark.parametrize("percent", [0, 10, 30])
    def test_lower_or_equal_percent_leaves_cache(self, db_session, make_project, percent):
        project = make_project(progress_percent=30)
        before = project.updated_at

        record_progress_update(db_session, "project", project.id, percent, "Correction")

        db_session.refresh(project)
        assert project.progress_percent == 30
        assert project.updated_at == before
        assert db_session.query(ProgressUpdate).count() == 1

    def test_defaults_images_and_date(self, db_session, make_project):
        project = make_project()

        update = record_progress_update(db_session, "project", project.id, 5, "Mobilised")

        assert update.images == []
        assert update.date == date.today()

    def test_keeps_image_order(self, db_session, make_project):
        project = make_project()
        images = ["https://img.example.com/3.jpg", "https://img.example.com/1.jpg"]

        update = record_progress_update(db_session, "project", project.id, 5, "Photos", images=images)

        assert update.images == images

    def test_task_scope_does_not_touch_project(self, db_session, make_project, make_task):
        project = make_project(progress_percent=10)
        task = make_task(project)

        update = record_progress_update(db_session, "task", task.id, 70, "Trenches dug", date=date(2024, 6, 1))

        assert update.task_id == task.id
        assert update.project_id is None
        assert task.progress_percent == 70
        assert project.progress_percent == 10

    @pytest.mark.parametrize("percent", [-1, 101, 50.5, True, "50", None])
    def test_rejects_invalid_percent(self, db_session, make_project, percent):
        project = make_project()

        with pytest.raises(ValidationError):
            record_progress_update(db_session, "project", project.id, percent, "Bad")

        assert db_session.query(ProgressUpdate).count() == 0

    def test_rejects_unknown_parent_type(self, db_session):
        with pytest.raises(ValidationError):
            record_progress_update(db_session, "building", 1, 10, "Bad")

    def test_missing_parent(self, db_session):
        with pytest.raises(NotFoundError):
            record_progress_update(db_session, "project", 999, 10, "Nowhere")
        with pytest.raises(NotFoundError):
            record_progress_update(db_session, "task", 999, 10, "Nowhere")


class TestMonotonicPolicy:
    """The cache always ends at the maximum percent ever submitted."""

    @pytest.mark.parametrize("order", list(itertools.permutations([20, 55, 10, 80])))
    def test_any_arrival_order_ends_at_max(self, db_session, make_project, order):
        project = make_project()

        for percent in order:
            record_progress_update(db_session, "project", project.id, percent, f"{percent}%")

        assert project.progress_percent == 80

    def test_raise_cached_progress_reports_change(self, db_session, make_project):
        project = make_project(progress_percent=40)

        assert raise_cached_progress(db_session, "project", project.id, 60) is True
        assert raise_cached_progress(db_session, "project", project.id, 60) is False
        assert raise_cached_progress(db_session, "project", project.id, 50) is False
        db_session.commit()

        assert project.progress_percent == 60

    def test_concurrent_writers_settle_on_max(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'concurrency.db'}", timeout=30)
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(bind=engine, autoflush=False)

        with Session() as session:
            project = Project(name="Tower crane base")
            session.add(project)
            session.commit()
            project_id = project.id

        percents = [20, 55, 10, 80]
        barrier = threading.Barrier(len(percents))
        errors = []

        def report(percent):
            session = Session()
            try:
                barrier.wait()
                record_progress_update(session, "project", project_id, percent, f"{percent}%")
            except Exception as exc:
                errors.append(exc)
            finally:
                session.close()

        threads = [threading.Thread(target=report, args=(p,)) for p in percents]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        with Session() as session:
            assert session.get(Project, project_id).progress_percent == 80
            assert session.query(ProgressUpdate).count() == 4
        engine.dispose()


class TestReviseProgressUpdate:

    def test_lowering_a_report_keeps_cache(self, db_session, make_project):
        project = make_project()
        update = record_progress_update(db_session, "project", project.id, 60, "Walls up")

        revised = revise_progress_update(db_session, update.id, {"progress_percent": 40})

        assert revised.progress_percent == 40
        assert project.progress_percent == 60

    def test_raising_a_report_raises_cache(self, db_session, make_project):
        project = make_project()
        update = record_progress_update(db_session, "project", project.id, 60, "Walls up")

        revise_progress_update(db_session, update.id, {"progress_percent": 75, "description": "Roof started"})

        assert project.progress_percent == 75
        assert update.description == "Roof started"

    def test_ignores_fields_outside_allow_list(self, db_session, make_project):
        project = make_project()
        other = make_project(name="Other")
        update = record_progress_update(db_session, "project", project.id, 20, "Start")

        revise_progress_update(db_session, update.id, {"parent_id": other.id, "parent_type": "task"})

        assert update.parent_id == project.id
        assert update.parent_type == "project"

    def test_rejects_invalid_percent(self, db_session, make_project):
        project = make_project()
        update = record_progress_update(db_session, "project", project.id, 20, "Start")

        with pytest.raises(ValidationError):
            revise_progress_update(db_session, update.id, {"progress_percent": 120})

    def test_missing_update(self, db_session):
        with pytest.raises(NotFoundError):
            revise_progress_update(db_session, 42, {"description": "x"})


class TestStoreFailures:

    @staticmethod
    def _broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    def test_failed_commit_raises_store_error_and_rolls_back(self, db_session, make_project, monkeypatch):
        project = make_project(progress_percent=10)
        monkeypatch.setattr(db_session, "commit", self._broken_commit)

        with pytest.raises(StoreError):
            record_progress_update(db_session, "project", project.id, 50, "Lost write")

        monkeypatch.undo()
        assert db_session.query(ProgressUpdate).count() == 0
        assert db_session.get(Project, project.id).progress_percent == 10

    def test_failed_commit_returns_500_envelope(self, client, db_session, make_project, monkeypatch):
        project = make_project()
        monkeypatch.setattr(db_session, "commit", self._broken_commit)

        response = client.post("/progress-updates", json={
            "project_id": project.id, "description": "Lost write", "progress_percent": 50,
        })

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Failed to record progress update"
        assert "disk I/O error" in body["error"]
