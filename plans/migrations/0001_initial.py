from django.db import migrations, models
import django.core.validators
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Plan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True, default='')),
                ('slug', models.SlugField(max_length=120, unique=True)),
                ('duration_unit', models.CharField(choices=[('DAY', 'Day'), ('WEEK', 'Week'), ('MONTH', 'Month'), ('YEAR', 'Year')], max_length=10)),
                ('duration_value', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('features', models.JSONField(blank=True, default=list)),
                ('is_trial', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('serial', models.PositiveIntegerField(default=0, help_text='Display order (ascending)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('post_trial_plan', models.ForeignKey(blank=True, help_text='Plan an organization moves to when this trial ends', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='trial_plans', to='plans.plan')),
            ],
            options={
                'db_table': 'plans',
                'ordering': ['serial', 'id'],
            },
        ),
    ]
