"""
Uploads: validation, unique storage names, org-scoped listing and removal.
"""
import os
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import IntegrityError
from django.test import TestCase, override_settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.exceptions import AppError
from core.models import AuditLog, Organization
from uploads import services
from uploads.models import Upload


def png(name="logo.png", content=b"\x89PNG\r\n\x1a\nfake"):
    return SimpleUploadedFile(name, content, content_type="image/png")


class UploadServiceTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.user = User.objects.create_user(
            email="member@acme.io", password="pass123", full_name="Member",
            role=User.ROLE_MEMBER, organization=self.org,
        )

    def test_unique_filename_shape(self):
        name = services.unique_filename("Scan.PDF")
        self.assertRegex(name, r"^\d{13}-\d+\.pdf$")
        self.assertRegex(services.unique_filename("README"), r"^\d{13}-\d+$")

    def test_single_upload_stores_file_under_uploads(self):
        upload = services.single_upload(png(), "http://testserver", self.org, self.user)
        self.assertTrue(upload.file.name.startswith("uploads/"))
        self.assertEqual(upload.filename, os.path.basename(upload.file.name))
        self.assertTrue(os.path.exists(upload.file.path))
        self.assertEqual(upload.original_name, "logo.png")
        self.assertEqual(upload.mimetype, "image/png")
        self.assertEqual(upload.url, f"http://testserver/media/uploads/{upload.filename}")
        self.assertTrue(AuditLog.objects.filter(action="File Uploaded", organization=self.org).exists())

    def test_missing_file_is_rejected(self):
        with self.assertRaises(AppError) as ctx:
            services.single_upload(None, "http://testserver", self.org, self.user)
        self.assertEqual(ctx.exception.status_code, 400)

    def test_disallowed_type_is_rejected(self):
        exe = SimpleUploadedFile("tool.exe", b"MZ", content_type="application/x-msdownload")
        with self.assertRaises(AppError) as ctx:
            services.single_upload(exe, "http://testserver", self.org, self.user)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(Upload.objects.count(), 0)

    @override_settings(UPLOAD_MAX_BYTES=8)
    def test_oversize_file_is_rejected(self):
        with self.assertRaises(AppError) as ctx:
            services.single_upload(png(content=b"0123456789"), "http://testserver", self.org, self.user)
        self.assertEqual(ctx.exception.status_code, 400)

    @override_settings(UPLOAD_MAX_FILES=2)
    def test_too_many_files_writes_nothing(self):
        files = [png(f"{i}.png") for i in range(3)]
        with self.assertRaises(AppError):
            services.multiple_upload(files, "http://testserver", self.org, self.user)
        self.assertEqual(Upload.objects.count(), 0)

    def test_one_bad_file_rejects_the_batch(self):
        files = [png(), SimpleUploadedFile("x.sh", b"#!", content_type="application/x-sh")]
        with self.assertRaises(AppError):
            services.multiple_upload(files, "http://testserver", self.org, self.user)
        self.assertEqual(Upload.objects.count(), 0)

    def test_failed_store_removes_files_written_for_the_batch(self):
        real_save = Upload.save
        stored_paths = []

        def save_then_fail_second(instance, *args, **kwargs):
            stored_paths.append(instance.file.path)
            if len(stored_paths) == 2:
                raise IntegrityError("row insert failed")
            return real_save(instance, *args, **kwargs)

        files = [png("a.png"), png("b.png"), png("c.png")]
        with mock.patch.object(Upload, "save", autospec=True, side_effect=save_then_fail_second):
            with self.assertRaises(IntegrityError):
                services.multiple_upload(files, "http://testserver", self.org, self.user)
        self.assertEqual(len(stored_paths), 2)
        for path in stored_paths:
            self.assertFalse(os.path.exists(path))
        self.assertEqual(Upload.objects.count(), 0)

    def test_delete_removes_file_from_disk(self):
        upload = services.single_upload(png(), "http://testserver", self.org, self.user)
        path = upload.file.path
        services.delete_file(self.user, upload.pk)
        self.assertFalse(os.path.exists(path))
        self.assertFalse(Upload.objects.filter(pk=upload.pk).exists())
        self.assertTrue(AuditLog.objects.filter(action="File Deleted").exists())

    def test_delete_tolerates_missing_file_on_disk(self):
        upload = services.single_upload(png(), "http://testserver", self.org, self.user)
        os.remove(upload.file.path)
        services.delete_file(self.user, upload.pk)
        self.assertFalse(Upload.objects.filter(pk=upload.pk).exists())


class UploadApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.other_org = Organization.objects.create(name="Globex", slug="globex")
        self.user = User.objects.create_user(
            email="member@acme.io", password="pass123", full_name="Member",
            role=User.ROLE_MEMBER, organization=self.org,
        )
        self.outsider = User.objects.create_user(
            email="member@globex.io", password="pass123", full_name="Outsider",
            role=User.ROLE_MEMBER, organization=self.other_org,
        )
        self.super_admin = User.objects.create_user(
            email="root@orgsuite.io", password="pass123", full_name="Root",
            role=User.ROLE_SUPER_ADMIN,
        )

    def _auth(self, user):
        token = AccessToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    def _upload(self, name="logo.png"):
        self._auth(self.user)
        res = self.client.post("/api/uploads/single", {"file": png(name)}, format="multipart")
        self.assertEqual(res.status_code, 201, res.data)
        return res.data

    def test_upload_requires_authentication(self):
        res = self.client.post("/api/uploads/single", {"file": png()}, format="multipart")
        self.assertEqual(res.status_code, 401)

    def test_single_upload(self):
        data = self._upload()
        self.assertRegex(data["filename"], r"^\d{13}-\d+\.png$")
        self.assertEqual(data["originalName"], "logo.png")
        self.assertEqual(data["organizationId"], self.org.id)
        self.assertTrue(data["url"].startswith("http://testserver/media/uploads/"))

    def test_single_upload_without_file_returns_400(self):
        self._auth(self.user)
        res = self.client.post("/api/uploads/single", {}, format="multipart")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "no_file")

    def test_disallowed_type_returns_400(self):
        self._auth(self.user)
        bad = SimpleUploadedFile("tool.exe", b"MZ", content_type="application/x-msdownload")
        res = self.client.post("/api/uploads/single", {"file": bad}, format="multipart")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "file_type_not_allowed")

    def test_multiple_upload(self):
        self._auth(self.user)
        res = self.client.post(
            "/api/uploads/multiple",
            {"files": [png("a.png"), png("b.png")]},
            format="multipart",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(len(res.data), 2)
        self.assertNotEqual(res.data[0]["filename"], res.data[1]["filename"])

    def test_list_is_scoped_and_searchable(self):
        self._upload("invoice-scan.png")
        self._upload("team.png")
        Upload.objects.create(
            organization=self.other_org, file="uploads/x.png", filename="x.png",
            url="http://testserver/media/uploads/x.png", mimetype="image/png", size=1,
        )
        res = self.client.get("/api/uploads/all")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 2)
        res = self.client.get("/api/uploads/all", {"search": "scan"})
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["originalName"], "invoice-scan.png")

    def test_org_listing_is_restricted(self):
        self._upload()
        self._auth(self.outsider)
        self.assertEqual(self.client.get(f"/api/uploads/org/{self.org.id}").status_code, 403)
        self._auth(self.super_admin)
        res = self.client.get(f"/api/uploads/org/{self.org.id}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(self.client.get("/api/uploads/org/9999").status_code, 404)

    def test_delete_other_org_file_returns_404(self):
        data = self._upload()
        self._auth(self.outsider)
        res = self.client.delete(f"/api/uploads/{data['id']}")
        self.assertEqual(res.status_code, 404)
        self.assertTrue(Upload.objects.filter(pk=data["id"]).exists())

    def test_delete_one(self):
        data = self._upload()
        res = self.client.delete(f"/api/uploads/{data['id']}")
        self.assertEqual(res.status_code, 200)
        self.assertFalse(Upload.objects.filter(pk=data["id"]).exists())

    def test_delete_many_skips_foreign_ids(self):
        first = self._upload("a.png")
        second = self._upload("b.png")
        foreign = Upload.objects.create(
            organization=self.other_org, file="uploads/y.png", filename="y.png",
            url="http://testserver/media/uploads/y.png", mimetype="image/png", size=1,
        )
        res = self.client.delete(
            "/api/uploads/multiple",
            {"fileIds": [first["id"], second["id"], foreign.id]},
            format="json",
        )
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["deleted"], 2)
        self.assertEqual(list(Upload.objects.values_list("pk", flat=True)), [foreign.pk])
        self.assertTrue(AuditLog.objects.filter(action="Files Deleted").exists())

    def test_delete_many_requires_ids(self):
        self._auth(self.user)
        res = self.client.delete("/api/uploads/multiple", {"fileIds": []}, format="json")
        self.assertEqual(res.status_code, 400)
