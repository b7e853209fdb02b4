"""
Task subsystem.

Components:
- task_models.py: data structures (Task, fire policies, notification content, schedule results)
- task_store.py: in-memory task registry (add / toggle / delete)
- reminders.py: reminder scheduling/cancellation helpers used by the registry
- task_scheduler.py: local notification service + polling delivery loop
"""
