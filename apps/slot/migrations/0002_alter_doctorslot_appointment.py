import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("appointment", "0001_initial"),
        ("slot", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="doctorslot",
            name="appointment",
            field=models.OneToOneField(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="slot",
                to="appointment.appointment",
            ),
        ),
    ]
