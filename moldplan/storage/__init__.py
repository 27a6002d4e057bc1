from moldplan.storage.repository import InMemoryScheduleRepository, ScheduleRepository

__all__ = ["InMemoryScheduleRepository", "ScheduleRepository"]
