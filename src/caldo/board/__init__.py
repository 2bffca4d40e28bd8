"""
Day board core.

Components:
- clock.py: "HH:MM" / date-key helpers
- models.py: data structures (Task, TimeRange, LayoutConfig)
- time_range.py: visible window for a day's tasks
- layout.py: time -> pixel projection, grid markers, "now" line
- packing.py: back-to-back packing shared by reorder and the CLI scheduler
- reorder.py: drag re-timing
- service.py: DayBoard, the in-memory day list written back through storage
"""
