"""Tests for report module.

Test Files and Coverage:
========================

| Test File             | Test Classes                                      | Tested Constructs                        | Tested Functionalities                      |
|-----------------------|---------------------------------------------------|------------------------------------------|---------------------------------------------|
| test_reporter.py      | RenderClassNameTest, ReportConflictsTest          | render_class_name, report_conflicts      | Class names, record order, summary record   |
| test_report_store.py  | ConflictSerializationTest, ReportStoreTest,       | ReportStore, ReportManifest, save_report | msgpack records, DB rewrite, manifest, save |
|                       | SaveReportTest                                    |                                          |                                             |
"""
